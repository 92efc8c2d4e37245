"""
Notes API Backend - Services Layer
===================================

What:  The query layer between routes (HTTP) and the database.
How:   Services accept a session plus validated schemas, run parameterized
       SQL, and return response schemas.

Service Inventory:
    - NoteService: create / get / update / delete / list for the notes table
"""
