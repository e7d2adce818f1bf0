# src/core/notifications/messages.py
"""
Тексты уведомлений о событиях.
Формулировки совпадают с теми, что уже видят пользователи.
"""

USER_CREATED = "User created"
USER_UPDATED = "User updated"

POST_CREATED = "Your post with id = {post_id} is up"
POST_UPDATED = "Your post with id = {post_id} is updated"
POST_DELETED = "Your post with id = {post_id} was deleted"

COMMENT_CREATED = "User with id = {user_id} left a comment under your post with id = {post_id}"

POST_LIKED = "User with id = {user_id} like your post with id = {post_id}"
COMMENT_LIKED = "User with id = {user_id} like your comment with id = {comment_id}"

MEDIA_UPLOADED = "Your file = {url} is uploaded successfully"
MEDIA_DELETED = "Your file = {url} deleted"

NEW_FOLLOWER = "New follower = {follower_id}"
UNFOLLOWED = "user = {follower_id} has unsubscribed"
