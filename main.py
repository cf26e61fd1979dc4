"""FastAPI application for the conversational bot webhook"""
import logging
from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables
load_dotenv()

from config import settings
from api.routes.webhook import router as webhook_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Create FastAPI app
app = FastAPI(
    title="Bot Dispatch Webhook",
    version="1.0.0",
    description="Rule-based dispatch for conversational bot requests",
    debug=settings.DEBUG,
)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.get("/api")
async def api_root():
    """API root endpoint"""
    return {
        "message": "Bot Dispatch Webhook",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
    }


app.include_router(webhook_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
