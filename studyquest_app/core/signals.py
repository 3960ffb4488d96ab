"""
Central Signal Registry for Event-Driven Architecture.

Uses blinker namespaces so the quiz lifecycle does not import the
gamification or stats internals directly.

Usage:
    # Publisher (sender)
    from studyquest_app.core.signals import answer_submitted
    answer_submitted.send(None, user_id=1, subject='Biology', ...)

    # Subscriber (receiver) - in module's events.py
    @answer_submitted.connect
    def on_answer_submitted(sender, **kwargs):
        ...
"""
from blinker import Namespace

# ============================================
# Quiz Signals
# ============================================
quiz_signals = Namespace()

# Signal: Fired after a quiz answer has been stored
# Payload: user_id, quiz_session_id, question_id, subject, topic,
#          is_correct, difficulty, time_taken
answer_submitted = quiz_signals.signal('answer_submitted')

# Signal: Fired once when a quiz session is finalised
# Payload: user_id, quiz_session_id, subject, score, points_earned
quiz_completed = quiz_signals.signal('quiz_completed')

# ============================================
# Gamification Signals
# ============================================
gamification_signals = Namespace()

# Signal: Fired when points are credited to a user
# Payload: user_id, points, source, subject, new_total
points_awarded = gamification_signals.signal('points_awarded')

# ============================================
# Content Signals
# ============================================
content_signals = Namespace()

# Signal: Fired when generated content has been persisted
# Payload: user_id, content_type ('questions', 'question_bank', 'note_summary'),
#          subject, items_count
content_generated = content_signals.signal('content_generated')

# ============================================
# AI Services Signals
# ============================================
ai_signals = Namespace()

# Signal: Fired after every successful model call
# Payload: user_id, feature (str), provider (str), model (str),
#          input_tokens (int), output_tokens (int)
ai_token_used = ai_signals.signal('ai_token_used')

# ============================================
# User Signals
# ============================================
user_signals = Namespace()

# Signal: Fired when a new user registers
# Payload: user (User object)
user_registered = user_signals.signal('user_registered')
