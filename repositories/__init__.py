"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all document-store calls for one collection.
Repositories receive raw documents from the store and return domain model objects.
"""
