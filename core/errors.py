"""Ошибки жизненного цикла стихов.

Каждая ошибка несёт ``message`` - уведомление для пользователя.
"""

from typing import Optional


class PoemError(Exception):
    default_message = "エラーが発生しました。"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(PoemError):
    default_message = "すべての句を入力し、地図で場所を選んでください。"


class IdentityRequired(PoemError):
    default_message = "この操作にはログインが必要です。"


class AuthorizationDenied(PoemError):
    default_message = "この投稿を操作できるのは作者本人のみです。"


class StoreUnavailable(PoemError):
    default_message = "サーバーに接続できません。しばらくしてから再度お試しください。"


class WriteRejected(PoemError):
    default_message = "保存が拒否されました。"


class QueryFailed(PoemError):
    default_message = "歌の読み込みに失敗しました。"


class PoemNotFound(QueryFailed):
    default_message = "歌が見つかりません。"
