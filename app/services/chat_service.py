# app/services/chat_service.py
"""
Role-aware Q&A over daily reports
"""

from datetime import datetime, timezone
from typing import List, Optional, Tuple
import asyncio
import logging

from app.config.settings import settings
from app.schemas.chat import ReportSource
from app.schemas.report import Report
from app.services.openai_client import first_choice_text
from app.utils.hierarchy import HierarchyManager

logger = logging.getLogger(__name__)

NO_REPORTS_CONTEXT = 'No relevant reports found for the specified time period.'
FALLBACK_RESPONSE = 'Unable to generate response'
SNIPPET_LENGTH = 150


def get_current_date() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def truncate_content(content: str, max_length: int) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length - 3] + '...'


async def calculate_relevance_score(query: str, content: str) -> float:
    """Share of query words that overlap a content word (substring either way), capped at 1.0"""
    query_words = query.lower().split()
    content_words = content.lower().split()
    if not query_words:
        return 0.0

    match_count = sum(
        1 for word in query_words
        if any(c_word in word or word in c_word for c_word in content_words)
    )
    return min(match_count / len(query_words), 1.0)


def create_chat_prompt(query: str, user_role: str, context: str) -> str:
    return f"""You are an AI assistant helping a {user_role} understand organizational reports and insights. Based on the provided context from team reports, answer the user's question in a helpful, professional manner.

Context from recent reports:
{context}

User Question: {query}

Please provide a comprehensive response that:
1. Directly answers the question based on the available information
2. References specific team members and their reports when relevant
3. Identifies any patterns or trends across reports
4. Highlights any blockers or issues that need attention
5. Provides actionable insights appropriate for a {user_role} role

If the context doesn't contain enough information to fully answer the question, acknowledge this limitation and suggest what additional information might be helpful.

Response:"""


class ChatService:
    """Searches visible reports, ranks them against a query and asks the model"""

    def __init__(self, client, hierarchy: HierarchyManager):
        self.client = client
        self.hierarchy = hierarchy
        self.model = settings.OPENAI['chat_model']

    def search_reports_by_role(self, user_role: str, user_id: Optional[str] = None,
                               context_date: Optional[str] = None) -> List[Report]:
        return self.hierarchy.resolve_reports(user_role, user_id, context_date)

    async def build_query_context(self, query: str, reports: List[Report],
                                  max_sources: int) -> Tuple[str, List[ReportSource]]:
        if not reports:
            return NO_REPORTS_CONTEXT, []

        scores = await asyncio.gather(*(calculate_relevance_score(query, r.content) for r in reports))
        # Ordering comes from the sort, not from completion order
        ranked = sorted(zip(reports, scores), key=lambda pair: pair[1], reverse=True)
        top_reports = ranked[:max(max_sources, 0)]

        sources = []
        context_parts = []
        for index, (report, score) in enumerate(top_reports):
            user = self.hierarchy.get_user(report.user_id)
            sources.append(ReportSource(
                user_id=report.user_id,
                user_name=user.name if user else 'Unknown User',
                user_role=user.role.value if user else 'Unknown Role',
                date=report.date,
                content_snippet=truncate_content(report.content, SNIPPET_LENGTH),
                relevance_score=score,
            ))
            author = f"{user.name} ({user.role.value})" if user else "Unknown (Unknown)"
            context_parts.append(f"[Source {index + 1}] {author}: {report.content}")

        return "\n\n".join(context_parts), sources

    async def generate_chat_response(self, query: str, user_role: str, context: str) -> str:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": create_chat_prompt(query, user_role, context)}],
            max_tokens=800,
            temperature=0.4,
        )
        return first_choice_text(completion, FALLBACK_RESPONSE)

    async def answer(self, query: str, user_role: str, user_id: Optional[str] = None,
                     context_date: Optional[str] = None, max_sources: int = 5) -> dict:
        reports = self.search_reports_by_role(user_role, user_id, context_date)
        logger.info(f"Chat query from {user_role} ({user_id or 'no id'}) on {context_date}: {len(reports)} visible reports")

        context, sources = await self.build_query_context(query, reports, max_sources)
        response = await self.generate_chat_response(query, user_role, context)
        return {"response": response, "sources": sources}
