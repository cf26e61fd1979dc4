"""API routes"""
