"""
Routes package for the guide API
"""


def register_blueprints(app):
    """Register all route blueprints with the Quart app"""
    from .guide import register as register_guide

    register_guide(app)
