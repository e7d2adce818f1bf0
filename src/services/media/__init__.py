"""
Media Service: Метаданные загруженных файлов.
"""
