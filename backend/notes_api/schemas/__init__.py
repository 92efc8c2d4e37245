"""
Notes API Backend - Pydantic Schemas Package
"""
