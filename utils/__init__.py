"""
Cross-cutting helpers: exception hierarchy, engine error decorator,
shared constants and the final-model blob codec.
"""
