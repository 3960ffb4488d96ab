"""Default achievement catalogue created on start-up."""

from ..models.progress import Achievement

DEFAULT_ACHIEVEMENTS = [
    # --- QUIZ COUNT ---
    {
        "key": "first_quiz",
        "name": "First Steps",
        "description": "Complete your first quiz",
        "icon": "fa-flag",
        "condition_type": Achievement.TYPE_QUIZ_COUNT,
        "condition_value": 1,
        "reward_points": 10,
    },
    {
        "key": "quiz_10",
        "name": "Quiz Regular",
        "description": "Complete 10 quizzes",
        "icon": "fa-list-check",
        "condition_type": Achievement.TYPE_QUIZ_COUNT,
        "condition_value": 10,
        "reward_points": 50,
    },
    {
        "key": "quiz_50",
        "name": "Quiz Marathoner",
        "description": "Complete 50 quizzes",
        "icon": "fa-person-running",
        "condition_type": Achievement.TYPE_QUIZ_COUNT,
        "condition_value": 50,
        "reward_points": 250,
    },

    # --- SCORE ---
    {
        "key": "perfect_score",
        "name": "Flawless",
        "description": "Score 100% on a quiz",
        "icon": "fa-star",
        "condition_type": Achievement.TYPE_PERFECT_SCORE,
        "condition_value": 100,
        "reward_points": 30,
    },

    # --- POINTS ---
    {
        "key": "points_500",
        "name": "Point Collector",
        "description": "Earn 500 points",
        "icon": "fa-coins",
        "condition_type": Achievement.TYPE_TOTAL_POINTS,
        "condition_value": 500,
        "reward_points": 25,
    },
    {
        "key": "points_5000",
        "name": "Point Hoarder",
        "description": "Earn 5,000 points",
        "icon": "fa-gem",
        "condition_type": Achievement.TYPE_TOTAL_POINTS,
        "condition_value": 5000,
        "reward_points": 100,
    },

    # --- STREAK ---
    {
        "key": "streak_3",
        "name": "Warming Up",
        "description": "Study 3 days in a row",
        "icon": "fa-seedling",
        "condition_type": Achievement.TYPE_STREAK,
        "condition_value": 3,
        "reward_points": 20,
    },
    {
        "key": "streak_7",
        "name": "Week Warrior",
        "description": "Study 7 days in a row",
        "icon": "fa-fire",
        "condition_type": Achievement.TYPE_STREAK,
        "condition_value": 7,
        "reward_points": 70,
    },
]
