from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_cms.core.database.base import dump_json
from portfolio_cms.core.database.entities import BlogPost, CaseStudy, ExperienceEntry, Project
from portfolio_cms.core.models.io.search import SearchResult
from portfolio_cms.server.services.search import SearchService, build_suggestions, calculate_relevance


@pytest.fixture
async def content(session: AsyncSession) -> None:
    session.add_all(
        [
            BlogPost(title="Automation", slug="automation", content="Where to start", category="AI", published=True),
            BlogPost(title="Unreleased", slug="draft-automation", content="More automation"),
            Project(title="Invoice automation", slug="invoice-automation", description="OCR pipeline"),
            CaseStudy(title="Warehouse", slug="warehouse", description="Automation of the warehouse intake"),
            ExperienceEntry(
                title="Automation Engineer",
                company="Acme",
                period="2021 - Present",
                type="Full-time",
                category="automation",
                achievements=dump_json(["Shipped 40 workflows"]),
            ),
            Project(title="Dashboard", slug="dashboard", description="Charts only"),
        ]
    )
    await session.commit()


class TestRelevance:
    @pytest.mark.parametrize(
        "text, query, expected",
        [
            ("Automation", "automation", 1.0),
            ("Automation tips", "AUTOMATION", 0.9),
            ("Python automation tips", "automation", 0.7),
            ("Python scripting", "python automation", 0.3),
            ("Spreadsheets", "automation", 0.0),
            (None, "automation", 0.0),
        ],
    )
    def test_scores(self, text, query: str, expected: float):
        assert calculate_relevance(text, query) == pytest.approx(expected)

    def test_partial_word_matches_count(self):
        assert calculate_relevance("automated pipelines", "automate pipeline") == pytest.approx(0.6)


class TestSuggestions:
    def test_words_from_titles_and_categories(self):
        results = [
            SearchResult(id="1", title="Automation Engineer", type="experience", url="/#experience", category="ops"),
            SearchResult(id="2", title="Invoice automation", type="project", url="/project/x", category="Finance"),
        ]
        assert build_suggestions("automation", results) == ["engineer", "invoice", "finance"]


class TestSearch:
    async def test_ranks_every_content_type(self, session: AsyncSession, content):
        results = await SearchService(session).search("automation")

        assert [(item.type, item.url) for item in results.results] == [
            ("blog", "/blog/automation"),
            ("experience", "/#experience"),
            ("case-study", "/case-study/warehouse"),
            ("project", "/project/invoice-automation"),
        ]
        assert results.total_results == 4
        assert results.results[0].relevance_score == 1.0
        assert results.results[1].title == "Automation Engineer at Acme"
        assert "automation" not in results.suggestions

    async def test_unpublished_posts_are_excluded(self, session: AsyncSession, content):
        results = await SearchService(session).search("more automation")
        assert results.results == []

    async def test_limit_shares_between_types(self, session: AsyncSession):
        session.add_all([Project(title=f"Bot {n}", slug=f"bot-{n}", description="d") for n in range(3)])
        await session.commit()

        results = await SearchService(session).search("bot", limit=2)

        assert len(results.results) == 1
        assert results.total_results == 1

    @pytest.mark.parametrize("query", ["a", "  a  ", ""])
    async def test_short_queries_are_rejected(self, session: AsyncSession, query: str):
        with pytest.raises(ValueError):
            await SearchService(session).search(query)
