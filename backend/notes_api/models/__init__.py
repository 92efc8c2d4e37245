"""
Notes API Backend - ORM Models Package
"""
