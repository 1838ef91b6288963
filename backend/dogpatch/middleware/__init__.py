# Middleware package init
"""
DogPatch Backend - Middleware Package
======================================

Middleware Chain (outermost first):
    Request -> [Rate Limit] -> [Request ID] -> [Access Log] -> [GZip] -> [CORS] -> Route

    1. Rate Limit rejects abusive clients before any other work happens
    2. Request ID sets the correlation id every later log line carries
    3. Access Log records status and duration once the route has answered
"""
