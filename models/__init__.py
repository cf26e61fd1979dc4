"""Request payload schemas and enums"""
