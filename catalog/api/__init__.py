#!/usr/bin/env python3
"""
Catalog API Package
-------------------
Handler-style entry points returning JSON responses.
"""
from .handlers import JsonResponse, MasterDataApi, Request, SimpleRequest

__all__ = ["JsonResponse", "MasterDataApi", "Request", "SimpleRequest"]
