"""Business logic services.

Services contain all business logic and are called by routes.
Services should accept dependencies explicitly and leave HTTP concerns to routes.
"""
