"""Infrastructure layer: database engine, schema, and repositories.

This layer depends on stdlib, SQLAlchemy, and the domain record models.
It must never import from services, commands, or output.
The service layer applies the duty rules on top of these repositories.
"""
