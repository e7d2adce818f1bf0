"""
Likes Service: Лайки постов и комментариев.
"""
