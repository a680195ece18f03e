import enum


class QuestionType(str, enum.Enum):
    MCQ = "MCQ"
    SHORT = "SHORT"
    LONG = "LONG"


class Difficulty(str, enum.Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class BloomLevel(str, enum.Enum):
    REMEMBER = "remember"
    UNDERSTAND = "understand"
    APPLY = "apply"
    ANALYZE = "analyze"
    EVALUATE = "evaluate"
    CREATE = "create"


# Subjects offered by the exam/quiz authoring form
SUBJECT_OPTIONS = [
    "Math",
    "Physics",
    "Chemistry",
    "Biology",
    "Zoology",
    "History",
    "Economics",
    "Civics",
    "Geography",
    "English",
    "Science",
    "Social Studies",
    "UG",
    "PG",
]
