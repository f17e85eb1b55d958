"""auth/ -- Credential handling for forum-auth: validation, hashing, storage, and the register/login flows.

Layer rule: auth/ imports only stdlib + third-party libraries, plus core/config.
It does NOT import from api/. api/ and main.py import from auth/, not the
other way around.
"""
