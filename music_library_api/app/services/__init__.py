"""
Service layer.

Each service owns the lifecycle of one entity kind: identifier and
timestamp assignment, validation of path ids and the translation
between pydantic schemas and stored documents.  Services receive their
``DocumentGateway`` from the application factory.
"""
