"""
Web API (FastAPI)
"""
