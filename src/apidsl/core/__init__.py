"""
apidsl core: IR types, evaluation context, configuration and errors.
"""
