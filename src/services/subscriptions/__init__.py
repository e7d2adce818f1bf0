"""
Subscriptions Service: Подписки между пользователями.
"""
