"""
Shop cart core

Shopping cart state, totals, persistence and synchronisation for the
storefront, organised as domain, application and infrastructure layers.
"""
