"""
Analytics listeners: log lifecycle events for operational visibility.
"""
from flask import current_app

from studyquest_app.core.signals import ai_token_used, content_generated, quiz_completed, user_registered


@quiz_completed.connect
def on_quiz_completed(sender, **kwargs):
    current_app.logger.info(
        f"[Stats] Quiz completed: user={kwargs.get('user_id')} session={kwargs.get('quiz_session_id')} "
        f"subject={kwargs.get('subject')} score={kwargs.get('score')} points={kwargs.get('points_earned')}"
    )


@content_generated.connect
def on_content_generated(sender, **kwargs):
    current_app.logger.info(
        f"[Stats] Content generated: user={kwargs.get('user_id')} type={kwargs.get('content_type')} "
        f"subject={kwargs.get('subject')} items={kwargs.get('items_count')}"
    )


@ai_token_used.connect
def on_ai_token_used(sender, **kwargs):
    current_app.logger.debug(
        f"[Stats] AI usage: feature={kwargs.get('feature')} provider={kwargs.get('provider')} "
        f"model={kwargs.get('model')} in~{kwargs.get('input_tokens')} out~{kwargs.get('output_tokens')}"
    )


@user_registered.connect
def on_user_registered(sender, **kwargs):
    user = kwargs.get('user')
    if user is not None:
        current_app.logger.info(f"[Stats] New user: {user.username} ({user.user_id})")
