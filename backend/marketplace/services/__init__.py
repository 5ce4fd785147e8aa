"""
Marketplace Backend — Services Layer
=====================================

What:  Every storage read and write the API performs.
How:   Services are stateless singletons. Each method receives the request's
       AsyncSession (and the caller, where the operation needs one), talks to
       the database, and raises application exceptions from
       marketplace.exceptions. Driver errors are translated into DatabaseError.

Service Inventory:
    - UserService:    users, profile pictures
    - PostService:    listings, tag assignment, owner lookups
    - TagService:     tags and the structured TagResult mutations
    - CommentService: authenticated comment create/update/delete

Services flush but never commit; the session dependency commits once per
request.
"""
