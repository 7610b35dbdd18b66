from .question_service import QuestionService, load_question_snapshots

__all__ = ["QuestionService", "load_question_snapshots"]
