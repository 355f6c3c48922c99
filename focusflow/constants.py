# -*- coding: utf-8 -*-

from typing import Dict, List, Tuple

from focusflow.domain.models import (
    MeditationType,
    NotificationMessage,
    SoundOption,
    TimerMode,
)

APP_NAME = "FocusFlow"

# key-value store keys
SETTINGS_KEY = "focusflow_settings"
SESSIONS_KEY = "focusflow_sessions"
TIMER_KEY = "focusflow_timer"

DEFAULT_TIMER_CONFIG = {
    "WORK_DURATION": 25,
    "SHORT_BREAK_DURATION": 5,
    "LONG_BREAK_DURATION": 15,
    "CYCLES_BEFORE_LONG_BREAK": 4,
}

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 120

AMBIENT_SOUNDS: List[SoundOption] = [
    SoundOption("rain", "Rain", "🌧️", "rain.mp3", "rain"),
    SoundOption("forest", "Forest", "🌲", "forest.mp3", "nature"),
    SoundOption("ocean", "Ocean", "🌊", "ocean.mp3", "nature"),
    SoundOption("fire", "Fireplace", "🔥", "fire.mp3", "ambient"),
    SoundOption("coffee", "Coffee shop", "☕", "coffee-shop.mp3", "ambient"),
    SoundOption("birds", "Birds", "🐦", "birds.mp3", "nature"),
    SoundOption("wind", "Wind", "💨", "wind.mp3", "nature"),
    SoundOption("piano", "Piano", "🎹", "piano.mp3", "instrumental"),
]
SOUNDS_BY_ID: Dict[str, SoundOption] = {s.id: s for s in AMBIENT_SOUNDS}

CHIME_FILE = "notification.mp3"
CHIME_VOLUME = 0.7
DEFAULT_VOLUME = 0.5

MEDITATION_DURATIONS: List[Tuple[int, str]] = [
    (5, "5 min"),
    (10, "10 min"),
    (15, "15 min"),
    (20, "20 min"),
    (30, "30 min"),
]
DEFAULT_MEDITATION_MINUTES = 10

MEDITATION_TYPES: List[MeditationType] = [
    MeditationType("breathing", "Breathing", "🫁", "Focus on your breath to relax"),
    MeditationType("mindfulness", "Mindfulness", "🧘", "Be present in the current moment"),
    MeditationType("body-scan", "Body Scan", "🎯", "Relax each part of your body"),
]

BREATHING_PHASE_SECONDS = 4
BREATHING_PHASES: List[Tuple[str, str]] = [
    ("inhale", "Breathe in deeply..."),
    ("hold", "Hold your breath..."),
    ("exhale", "Breathe out slowly..."),
    ("pause", "Rest..."),
]

MOTIVATIONAL_MESSAGES: Dict[TimerMode, List[str]] = {
    TimerMode.WORK: [
        "Time to focus! 💪",
        "Let's get things done! 🚀",
        "Full focus now! ⚡",
        "You can do it! 🎯",
        "Hands on deck! 🔥",
    ],
    TimerMode.SHORT_BREAK: [
        "Well-deserved break! ☕",
        "Take a deep breath! 🌿",
        "Relax for a bit! 😌",
        "Stretch yourself! 🤸",
        "Drink some water! 💧",
    ],
    TimerMode.LONG_BREAK: [
        "Long break! 🎉",
        "Time to recharge! 🔋",
        "You're doing great! ⭐",
        "You earned this rest! 😴",
        "Keep it up! 🌟",
    ],
}

MODE_LABELS: Dict[TimerMode, str] = {
    TimerMode.WORK: "Focus",
    TimerMode.SHORT_BREAK: "Short Break",
    TimerMode.LONG_BREAK: "Long Break",
}

NOTIFICATION_CONFIG: Dict[str, NotificationMessage] = {
    "WORK_COMPLETE": NotificationMessage(
        "🎉 Focus session complete!", "Congratulations! Time for a break."
    ),
    "BREAK_COMPLETE": NotificationMessage(
        "⏰ Break is over!", "Ready to get back to work?"
    ),
    "MEDITATION_COMPLETE": NotificationMessage(
        "🧘 Meditation complete", "Take that calm with you."
    ),
}
