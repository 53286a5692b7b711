"""
Corporate License Service Django project.
"""
