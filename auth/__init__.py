"""
auth — Privacy-preserving authentication core.

Provides:
  • Deterministic, salted SHA-256 email hashing (lookup / uniqueness key)
  • Argon2id password hashing and verification
  • In-memory bearer session registry
  • ``AuthService`` — register / login / reset / logout / list operations
"""
