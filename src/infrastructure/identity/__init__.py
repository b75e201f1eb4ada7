from .token_verifier import TokenVerifier, extract_bearer_token  # noqa: F401
