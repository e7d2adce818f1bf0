"""
Comments Service: Комментарии к постам.
"""
