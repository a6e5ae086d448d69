"""
개발용 샘플 데이터 삽입 스크립트

    python -m qisati.scripts.seed
"""

import asyncio
import logging
import random
import sys
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))

from sqlalchemy import select

from qisati.core.constants import STATUS_LIVE, STATUS_DRAFT, STATUS_COMING
from qisati.core.database import AsyncSessionLocal, engine, Base
from qisati.models import User, Series, Chapter
from qisati.services.explore_service import snapshot_metrics

logger = logging.getLogger(__name__)


SAMPLE_USERS = [
    {
        "handle": "sarah_chen",
        "avatar_url": "https://picsum.photos/100/100?random=1",
        "about": "Tech journalist turned fiction writer, exploring the intersection of technology and human connection.",
    },
    {
        "handle": "kenji_nakamura",
        "avatar_url": "https://picsum.photos/100/100?random=2",
        "about": "Cyberpunk author from Neo Tokyo, writing the future one line of code at a time.",
    },
]

SAMPLE_SERIES = [
    {
        "author": "sarah_chen",
        "slug": "digital-nomad",
        "title": "The Digital Nomad Chronicles",
        "cover_url": "https://picsum.photos/240/360?random=1",
        "logline": "A thrilling journey through remote work culture and digital freedom.",
        "synopsis_md": "# About This Series\n\nFollow Maya as she navigates the complexities of digital nomadism.",
        "contract": "0x1234567890123456789012345678901234567890",
        "category": "literary",
    },
    {
        "author": "kenji_nakamura",
        "slug": "neo-tokyo-nights",
        "title": "Midnight in Neo Tokyo",
        "cover_url": "https://picsum.photos/240/360?random=2",
        "logline": "Neon-soaked streets hide digital secrets in this cyberpunk thriller.",
        "synopsis_md": "# Neo Tokyo Nights\n\nIn the year 2087, Neo Tokyo pulses with digital life.",
        "contract": "0x2345678901234567890123456789012345678901",
        "category": "sci-fi",
    },
    {
        "author": "sarah_chen",
        "slug": "last-library",
        "title": "The Last Library",
        "cover_url": "https://picsum.photos/240/360?random=3",
        "logline": "In a world without books, one librarian fights to preserve human knowledge.",
        "synopsis_md": "# The Last Library\n\nBooks are extinct. Knowledge is controlled.",
        "contract": "0x3456789012345678901234567890123456789012",
        "category": "fantasy",
    },
]

SAMPLE_CHAPTERS = [
    ("The Great Escape", 3500, "QmChapter1Content"),
    ("Bali Bound", 4200, "QmChapter2Content"),
    ("The Coworking Conspiracy", 3800, "QmChapter3Content"),
    ("Digital Detox", 4100, "QmChapter4Content"),
    ("The Network Effect", 3900, "QmChapter5Content"),
]


def _status_for(position: int) -> str:
    # 앞 두 회차는 공개, 세 번째는 초안, 나머지는 예고
    if position < 2:
        return STATUS_LIVE
    if position == 2:
        return STATUS_DRAFT
    return STATUS_COMING


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        existing = await db.execute(select(Series).where(Series.slug == SAMPLE_SERIES[0]["slug"]))
        if existing.scalar_one_or_none():
            logger.info("⏭️  이미 시드 데이터가 있습니다. 건너뜁니다.")
            return

        users = {}
        for data in SAMPLE_USERS:
            user = User(**data)
            db.add(user)
            users[data["handle"]] = user
        await db.flush()

        for data in SAMPLE_SERIES:
            fields = dict(data)
            author = users[fields.pop("author")]
            series = Series(author_id=author.id, token_id=1, **fields)
            db.add(series)
            await db.flush()

            for position, (title, words, cid) in enumerate(SAMPLE_CHAPTERS):
                status = _status_for(position)
                db.add(Chapter(
                    series_id=series.id,
                    index=position + 1,
                    title=title,
                    word_count=words,
                    status=status,
                    price_eth=0.002,
                    supply=500,
                    remaining=random.randint(50, 449) if status == STATUS_LIVE else 500,
                    token_id=position + 2,
                    markdown_cid=cid,
                    body_md=f"# {title}\n\nSample chapter body." if status == STATUS_LIVE else None,
                    audio_segments=[],
                ))

        await db.commit()
        snapshot = await snapshot_metrics(db)
        logger.info(f"✅ 시드 완료: series={snapshot.total_series} chapters={snapshot.total_chapters}")


def main():
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
