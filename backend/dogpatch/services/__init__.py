# Services package init
"""
DogPatch Backend - Services Layer
==================================

What:  Business logic between the routes (HTTP) and the database.
How:   Each service is a stateless class with a module-level singleton. Methods
       take the request's AsyncSession and raise the exceptions in
       dogpatch.exceptions; routes never see SQLAlchemy errors.

Service Inventory:
    - ReviewAggregator (review_service): records reviews, folds the seller's
      average, cascades it onto the seller's dogs
    - UserService: registration, lookup, login, sparse profile updates
    - DogService: listing creation, the listing index, seller lookup
    - ImageService: local-disk image storage for profiles and listings
"""
