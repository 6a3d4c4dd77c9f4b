"""Prompt templates and canned responses per content type."""

from __future__ import annotations

from enum import Enum


class ContentType(str, Enum):
    QUIZ = "quiz"
    FLASHCARDS = "flashcards"
    KEY_TERMS = "keyTerms"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


_DIFFICULTY_HINTS = {
    Difficulty.EASY: "- Include straightforward questions that test basic understanding and recall.",
    Difficulty.MEDIUM: "- Include questions that require some analysis and deeper understanding.",
    Difficulty.HARD: "- Include challenging questions that require critical thinking and advanced understanding.",
}

KEY_TERMS_INSTRUCTION = (
    "Extract the key terms and definitions from the text above. "
    "For each key term, provide a definition. Format the result as follows:\n\n"
    "Term: [term name]\n"
    "Definition: [definition]\n\n"
    "Term: [term name]\n"
    "Definition: [definition]\n\n"
    "And so on. Make sure each term and definition appears only once and follows "
    'the exact format shown above. Do not repeat the words "Term:" or "Definition:" '
    "multiple times in succession."
)

FLASHCARDS_INSTRUCTION = (
    "Create flashcards based on the text above. Format each flashcard EXACTLY as follows:\n\n"
    "Q: [question text]\n"
    "A: [answer text]\n\n"
    "Q: [question text]\n"
    "A: [answer text]\n\n"
    "Make sure each flashcard follows this exact format with 'Q:' at the start of the "
    "question line and 'A:' at the start of the answer line, and have one blank line "
    "between flashcards."
)


def _quiz_instruction(difficulty: Difficulty, num_questions: int) -> str:
    return (
        f"Create a {difficulty.value} difficulty quiz with exactly {int(num_questions)} "
        "multiple choice questions based on the text above.\n\n"
        f"For {difficulty.value} difficulty:\n"
        f"{_DIFFICULTY_HINTS[difficulty]}\n\n"
        "Format each question exactly as follows:\n\n"
        "Q: [question text]\n"
        "A: [option A]\n"
        "B: [option B]\n"
        "C: [option C]\n"
        "D: [option D]\n"
        "Correct: [correct letter]\n\n"
        "Make sure each question follows this exact format, with each option on a new line. "
        "Use only A, B, C, or D as the correct answer. Make sure there are no extra blank "
        "lines between questions, options, or answers. Each question should test "
        "understanding of important concepts from the text."
    )


def build_prompt(
    content_type: ContentType,
    text: str,
    *,
    difficulty: Difficulty = Difficulty.MEDIUM,
    num_questions: int = 5,
) -> str:
    content_type = ContentType(content_type)
    if content_type == ContentType.QUIZ:
        instruction = _quiz_instruction(Difficulty(difficulty), num_questions)
    elif content_type == ContentType.FLASHCARDS:
        instruction = FLASHCARDS_INSTRUCTION
    else:
        instruction = KEY_TERMS_INSTRUCTION
    return f"{text}\n\n{instruction}"


# Served when no API key is configured or MOCK_MODE is on.
MOCK_RESPONSES: dict[ContentType, str] = {
    ContentType.KEY_TERMS: """Term: Artificial Intelligence
Definition: The simulation of human intelligence processes by machines, especially computer systems.

Term: Machine Learning
Definition: A subset of AI focused on algorithms that improve automatically through experience.

Term: Neural Networks
Definition: Computing systems inspired by biological neural networks that form the basis for deep learning.

Term: Deep Learning
Definition: A subset of machine learning using multiple layers of neural networks to process complex data.

Term: Natural Language Processing
Definition: AI technology that enables computers to understand and generate human language.

Formulas:
Sigmoid Activation Function: f(x) = 1 / (1 + e^(-x))
Cost Function: J(θ) = -1/m * Σ[y*log(h(x)) + (1-y)*log(1-h(x))]
Backpropagation: ∂E/∂w = ∂E/∂o * ∂o/∂n * ∂n/∂w""",
    ContentType.FLASHCARDS: """Q: What is Artificial Intelligence?
A: The simulation of human intelligence processes by machines, especially computer systems.

Q: What is Machine Learning?
A: A subset of AI focused on algorithms that improve automatically through experience.

Q: What are Neural Networks?
A: Computing systems inspired by biological neural networks that form the basis for deep learning.

Q: What is Deep Learning?
A: A subset of machine learning using multiple layers of neural networks to process complex data.

Q: What is Natural Language Processing?
A: AI technology that enables computers to understand and generate human language.""",
    ContentType.QUIZ: """Q: Which of the following is NOT a subset of AI?
A: Machine Learning
B: Deep Learning
C: Quantum Computing
D: Natural Language Processing
Correct: C

Q: What is the main characteristic of machine learning algorithms?
A: They require human supervision at all times
B: They improve automatically through experience
C: They only work with numerical data
D: They cannot process unstructured data
Correct: B

Q: Which activation function outputs values between 0 and 1?
A: ReLU
B: Tanh
C: Sigmoid
D: Linear
Correct: C""",
}
