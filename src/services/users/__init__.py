"""
Users Service: Регистрация, профили и публичные карточки пользователей.
"""
