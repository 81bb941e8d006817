"""Medical question classification backed by a structured-output LLM call."""

import logging

from medads.classification import taxonomy
from medads.classification.models import Classification
from medads.llm.base import LLMProvider, Message, parse_json_object

logger = logging.getLogger(__name__)

SAMPLE_QUESTION = (
    "What are the latest treatment options for a 67-year-old male with stage 3 "
    "pancreatic cancer who has not responded to gemcitabine?"
)


class MedicalQuestionClassifier:
    """Classifies free-text medical questions into the clinical taxonomy."""

    def __init__(self, llm_provider: LLMProvider, temperature: float = 0.1):
        """Initialize the classifier.

        Args:
            llm_provider: Provider used for the structured-output call
            temperature: Sampling temperature for classification
        """
        self.llm_provider = llm_provider
        self.temperature = temperature

    def build_prompt(self, question: str) -> str:
        """Build the classification prompt for a question."""
        topic_tags = ", ".join(taxonomy.TOPIC_TAGS)
        return f"""
As a medical question classifier for a physician-focused platform, analyze the following medical question.

QUESTION: "{question}"

Provide a detailed classification in JSON format with the following structure:
{{
  "primaryCategory": {{
    "id": "category_id",
    "name": "Category Name",
    "confidence": 0.95
  }},
  "subcategory": {{
    "id": "subcategory_id",
    "name": "Subcategory Name",
    "confidence": 0.85
  }},
  "keywords": ["keyword1", "keyword2", "keyword3"],
  "relevantMedications": ["medication1", "medication2"],
  "categories": ["treatment", "medication"]
}}

Available medical categories with subcategories:
{taxonomy.format_for_prompt()}

Instructions:
1. Choose the most relevant primary category and specific subcategory
2. If the question doesn't clearly match a category, select the most probable one with lower confidence
3. Extract 3-5 relevant medical keywords from the question
4. If medications are mentioned or implied, include them in relevantMedications
5. In categories, list which of these topics the question is about: {topic_tags}
6. Confidence is a number between 0 and 1 (0.9+ very certain, 0.6-0.8 moderately certain, below 0.6 uncertain)

Your response must be valid JSON with the exact structure shown above.
"""

    async def classify(
        self,
        question: str,
        history: list[Message] | None = None,
        raise_on_error: bool = False,
    ) -> Classification:
        """Classify a medical question.

        Failures never reach the caller by default: provider errors, empty
        content and malformed or mis-shaped JSON all yield
        ``Classification.fallback()``.

        Args:
            question: The medical question to classify
            history: Optional conversation history for context
            raise_on_error: Re-raise failures instead of degrading

        Returns:
            Structured classification of the question
        """
        try:
            result = await self.llm_provider.generate_structured(
                self.build_prompt(question),
                history=history,
                temperature=self.temperature,
            )
            data = parse_json_object(result.content)
            classification = Classification.model_validate(data)

            logger.info(
                f"Classified question as {classification.primary_category.id}/"
                f"{classification.subcategory.id} "
                f"({classification.primary_category.confidence:.2f})"
            )
            return classification

        except Exception as e:
            logger.error(f"Error classifying medical question: {e}")
            if raise_on_error:
                raise
            return Classification.fallback()

    async def test_classifier(self) -> tuple[str, Classification]:
        """Classify a fixed sample question, for smoke-testing a deployment."""
        classification = await self.classify(SAMPLE_QUESTION)
        return SAMPLE_QUESTION, classification
