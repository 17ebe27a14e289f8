"""
API types package - Pydantic request/response models.

Thin adapters around helpers/dto; services never import pydantic.
"""
