"""
Application Layer

Contains the cart orchestrator and the public cart API.
This layer drives the domain reducer and coordinates the persistence
adapters on behalf of the storefront UI.
"""
