"""
DeepSeek API Client

DeepSeek uses OpenAI-compatible API, so we use the openai library.

AI is used ONLY for mock interviews:
- generating interview questions for a role / difficulty / round
- scoring a candidate's answer to one question

Keep prompts short and ask for strict JSON so results can be stored as-is.
"""
import json
from typing import List, Optional

from loguru import logger
from openai import OpenAI, OpenAIError

from hireflow.core.config import get_settings

settings = get_settings()


class DeepSeekClient:
    """
    Wrapper for DeepSeek API with interview-specific methods.
    """

    def __init__(self, client: OpenAI = None):
        self.client = client or OpenAI(
            api_key=settings.deepseek_api_key or "not-configured",
            base_url=settings.deepseek_base_url
        )
        self.model = settings.deepseek_model

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1000) -> str:
        """
        Internal method to call DeepSeek API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=0.3
        )
        return response.choices[0].message.content

    def _extract_json(self, text: Optional[str]):
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        Raises ValueError on an empty reply.
        """
        if not text or not text.strip():
            raise ValueError("empty response from model")
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return json.loads(text.strip())

    def generate_questions(
        self,
        job_role: str,
        difficulty: str,
        round_type: str,
        count: int,
        resume_content: Optional[str] = None
    ) -> List[dict]:
        """
        Generate interview questions.

        Returns a list like:
        [{"question": "...", "type": "technical", "expected_topics": ["..."]}]
        """
        system_prompt = f"""You are an experienced interviewer. Write {count} interview questions.
Return ONLY a JSON array:
[{{"question": "string", "type": "technical|behavioral|situational", "expected_topics": ["topic1", "topic2"]}}]
For a "mixed" round combine all three types. Behavioral questions should invite STAR-format answers.
Return ONLY the JSON, no explanation."""

        user_content = f"Role: {job_role}\nDifficulty: {difficulty}\nRound: {round_type}"
        if resume_content:
            # Trim long resumes, the model only needs the gist
            user_content += f"\nTailor questions to this resume:\n{resume_content[:4000]}"

        response = self._call_api(system_prompt, user_content, max_tokens=1200)
        return self._extract_json(response)

    def evaluate_answer(
        self,
        question: str,
        answer: str,
        job_role: str,
        difficulty: str,
        question_type: str
    ) -> dict:
        """
        Score one answer. All scores are 0-10.
        technical_accuracy is null for non-technical questions.
        """
        system_prompt = """You are an interview coach. Evaluate the answer and return ONLY valid JSON.
Output format:
{
  "score": number,
  "clarity": number,
  "relevance": number,
  "technical_accuracy": number or null,
  "communication": number,
  "strengths": ["string"],
  "weaknesses": ["string"],
  "improvements": ["string"]
}
All numbers are between 0 and 10. Return ONLY the JSON, no explanation."""

        user_content = (
            f"Role: {job_role}\nDifficulty: {difficulty}\nQuestion type: {question_type}\n"
            f"Question: {question}\nAnswer: {answer or '(no answer)'}"
        )
        response = self._call_api(system_prompt, user_content, max_tokens=600)
        return self._extract_json(response)

    def test_connection(self) -> bool:
        """Test if DeepSeek API is reachable"""
        try:
            response = self._call_api(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10
            )
            return "OK" in (response or "").upper()
        except OpenAIError as e:
            logger.warning(f"DeepSeek connection failed: {e}")
            return False


# Singleton instance
_deepseek_client: DeepSeekClient = None


def get_deepseek_client() -> DeepSeekClient:
    """Get or create DeepSeek client (singleton pattern)"""
    global _deepseek_client
    if _deepseek_client is None:
        _deepseek_client = DeepSeekClient()
    return _deepseek_client
