"""
Posts Service: Посты и их карточки со счётчиками.
"""
