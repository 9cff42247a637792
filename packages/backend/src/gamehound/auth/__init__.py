"""Authentication and authorization.

Learn: One authentication path — email/password → bcrypt check → JWT
bearer token. Every protected route resolves the token to an Identity,
and the project service uses that identity for row-level scoping.
"""
