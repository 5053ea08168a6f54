"""Domain Services for the account service.

- Token lifecycle: issuance, validation, session rotation, revocation
- User authentication (username/password)
- User registration and its event
"""
