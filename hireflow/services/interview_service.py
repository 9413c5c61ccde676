"""
Interview Service - AI mock interview sessions.

PURPOSE:
1. Create a session: DeepSeek writes the questions, each gets the
   difficulty's time limit
2. Complete a session: DeepSeek scores every answer, a time bonus is
   applied, the total is stored and folded into the user's stats
3. Analytics over a user's completed sessions

AI output is never trusted as-is: every field is validated and clamped
before it is stored.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any

from loguru import logger
from openai import OpenAIError

from hireflow.core.auth import CallerIdentity
from hireflow.core.exceptions import NotFoundException, InvalidRequestException, ExternalServiceException
from hireflow.schemas.schemas import RoundType, AnswerMode
from hireflow.services.deepseek_client import DeepSeekClient, get_deepseek_client
from hireflow.services.mongo_service import InterviewSessionService, UserService


# Seconds per question
TIME_LIMITS = {
    "beginner": 180,
    "intermediate": 150,
    "advanced": 120,
}

SCORE_FIELDS = ("score", "clarity", "relevance", "communication")


# ============================================================
# VALIDATION HELPERS
# ============================================================

def clamp_score(value: Any, default: float = 0.0) -> float:
    """Coerce to a 0-10 float rounded to one decimal."""
    try:
        number = float(value)
    except (ValueError, TypeError):
        number = default
    return round(min(10.0, max(0.0, number)), 1)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v]


def validate_questions(
    data: Any,
    round_type: str,
    answer_mode: str,
    time_limit: int,
    count: int
) -> List[dict]:
    """
    Validate generated questions.
    Non-mixed rounds force every question to the round's type.
    """
    if isinstance(data, dict):
        data = data.get("questions", [])
    if not isinstance(data, list):
        return []

    allowed_types = {t.value for t in RoundType} - {RoundType.mixed.value}
    questions = []
    for item in data:
        if not isinstance(item, dict):
            continue
        text = str(item.get("question", "")).strip()
        if not text:
            continue
        if round_type == RoundType.mixed.value:
            q_type = item.get("type") if item.get("type") in allowed_types else RoundType.technical.value
        else:
            q_type = round_type
        questions.append({
            "id": f"q{len(questions) + 1}",
            "question": text,
            "type": q_type,
            "expectedTopics": _string_list(item.get("expected_topics", item.get("expectedTopics"))),
            "answerMode": answer_mode,
            "timeLimit": time_limit,
        })
        if len(questions) == count:
            break
    return questions


def validate_feedback(data: Any, question: dict) -> dict:
    """Validate and clamp an AI evaluation for one question."""
    data = data if isinstance(data, dict) else {}
    feedback = {"questionId": question["id"]}
    for field in SCORE_FIELDS:
        feedback[field] = clamp_score(data.get(field))

    technical = data.get("technical_accuracy", data.get("technicalAccuracy"))
    if question["type"] == RoundType.technical.value and technical is not None:
        feedback["technicalAccuracy"] = clamp_score(technical)
    else:
        feedback["technicalAccuracy"] = None

    feedback["strengths"] = _string_list(data.get("strengths"))
    feedback["weaknesses"] = _string_list(data.get("weaknesses"))
    feedback["improvements"] = _string_list(data.get("improvements"))
    return feedback


def compute_time_bonus(time_taken: int, time_limit: int) -> float:
    """
    +1 within half the limit, 0 within the limit, -1 over the limit.
    A time of 0 means the client did not record it: no bonus.
    """
    if time_taken <= 0:
        return 0.0
    if time_taken <= time_limit / 2:
        return 1.0
    if time_taken <= time_limit:
        return 0.0
    return -1.0


def empty_feedback(question: dict) -> dict:
    feedback = {"questionId": question["id"], "technicalAccuracy": None}
    feedback.update({field: 0.0 for field in SCORE_FIELDS})
    feedback.update({
        "strengths": [],
        "weaknesses": ["No answer provided"],
        "improvements": ["Attempt every question, even briefly"],
    })
    return feedback


def format_history_date(value: datetime) -> str:
    """e.g. 'Oct 9'"""
    return f"{value:%b} {value.day}"


def _average(total: float, count: int) -> float:
    return round(total / count, 1) if count else 0.0


# ============================================================
# SERVICE
# ============================================================

class InterviewService:

    def __init__(
        self,
        sessions: InterviewSessionService,
        users: UserService,
        ai: DeepSeekClient
    ):
        self.sessions = sessions
        self.users = users
        self.ai = ai

    def create_session(
        self,
        caller: CallerIdentity,
        job_role: str,
        difficulty: str,
        round_type: str,
        question_count: int = 5,
        answer_mode: str = AnswerMode.text.value,
        resume_content: Optional[str] = None
    ) -> dict:
        time_limit = TIME_LIMITS[difficulty]
        try:
            raw = self.ai.generate_questions(job_role, difficulty, round_type, question_count, resume_content)
        except (OpenAIError, ValueError) as e:
            raise ExternalServiceException("DeepSeek", str(e))

        questions = validate_questions(raw, round_type, answer_mode, time_limit, question_count)
        if not questions:
            raise ExternalServiceException("DeepSeek", "no usable questions were generated")

        session = self.sessions.create(
            user_id=caller.user_id,
            job_role=job_role,
            difficulty=difficulty,
            round_type=round_type,
            questions=questions,
            resume_content=resume_content,
        )
        logger.info(f"Interview session {session['id']} created for {caller.user_id} ({job_role}, {difficulty})")
        return session

    def get_session(self, caller: CallerIdentity, session_id: str) -> dict:
        session = self.sessions.get_by_id(session_id)
        if not session or session.get("userId") != caller.user_id:
            raise NotFoundException("Interview session", session_id)
        return session

    def list_sessions(self, caller: CallerIdentity) -> List[dict]:
        return self.sessions.get_by_user(caller.user_id)

    def complete_session(self, caller: CallerIdentity, session_id: str, submissions: List[dict]) -> dict:
        """
        Evaluate answers and store the result.

        `submissions` items: {"question_id", "answer", "time_taken"}.
        Questions without an answer score zero without an AI call.
        """
        session = self.get_session(caller, session_id)
        if session.get("completedAt"):
            raise InvalidRequestException("Interview session already completed")

        questions = {q["id"]: q for q in session["questions"]}
        by_question: Dict[str, dict] = {}
        for item in submissions:
            if item["question_id"] not in questions:
                raise InvalidRequestException(f"Unknown question id '{item['question_id']}'")
            by_question[item["question_id"]] = item

        answers: Dict[str, str] = {}
        feedback: List[dict] = []
        for question in session["questions"]:
            submission = by_question.get(question["id"], {})
            answer = (submission.get("answer") or "").strip()
            answers[question["id"]] = answer

            if not answer:
                item = empty_feedback(question)
            else:
                try:
                    raw = self.ai.evaluate_answer(
                        question["question"], answer, session["jobRole"], session["difficulty"], question["type"]
                    )
                except (OpenAIError, ValueError) as e:
                    raise ExternalServiceException("DeepSeek", str(e))
                item = validate_feedback(raw, question)

            time_taken = int(submission.get("time_taken", 0) or 0)
            item["timeTaken"] = time_taken
            item["timeBonus"] = compute_time_bonus(time_taken, question["timeLimit"]) if answer else 0.0
            item["adjustedScore"] = clamp_score(item["score"] + item["timeBonus"])
            feedback.append(item)

        total_score = _average(sum(f["adjustedScore"] for f in feedback), len(feedback))
        self.sessions.complete(session_id, answers, feedback, total_score)
        self.users.record_interview_score(caller.user_id, total_score)
        logger.info(f"Interview session {session_id} completed with score {total_score}")
        return self.sessions.get_by_id(session_id)

    def get_analytics(self, caller: CallerIdentity) -> dict:
        """Totals, average, last 7 scores (oldest first) and a skill breakdown."""
        completed = [s for s in self.sessions.get_by_user(caller.user_id) if s.get("completedAt")]

        total_sessions = len(completed)
        average_score = _average(sum(s.get("totalScore", 0) for s in completed), total_sessions)

        score_history = [
            {"date": format_history_date(s["createdAt"]), "score": s.get("totalScore", 0)}
            for s in reversed(completed[:7])
        ]

        breakdown = {name: [0.0, 0] for name in ("technical", "communication", "clarity", "relevance")}
        for session in completed:
            for f in session.get("feedback", []):
                if f.get("technicalAccuracy") is not None:
                    breakdown["technical"][0] += f["technicalAccuracy"]
                    breakdown["technical"][1] += 1
                for name in ("communication", "clarity", "relevance"):
                    breakdown[name][0] += f.get(name, 0)
                    breakdown[name][1] += 1

        # Fall back to a share of the overall average when no feedback exists
        fallback = {"technical": 0.9, "communication": 0.85, "clarity": 0.95, "relevance": 0.9}
        skill_breakdown = [
            {
                "skill": name.capitalize(),
                "score": _average(*breakdown[name]) or round(average_score * fallback[name], 1),
            }
            for name in ("technical", "communication", "clarity", "relevance")
        ]

        return {
            "totalSessions": total_sessions,
            "averageScore": average_score,
            "scoreHistory": score_history,
            "skillBreakdown": skill_breakdown,
        }


def get_interview_service() -> InterviewService:
    return InterviewService(
        sessions=InterviewSessionService(),
        users=UserService(),
        ai=get_deepseek_client(),
    )
