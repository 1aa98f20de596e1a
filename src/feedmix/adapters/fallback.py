"""Bundled demo records served when a provider cannot be reached.

Timestamps are relative to import time so the demo feed always looks fresh; the
lists themselves are built once and never change while the process runs.
"""

from datetime import UTC, datetime, timedelta

from feedmix.models import MovieRecord, NewsArticle, NewsSourceRef, SocialPost
from feedmix.utils.date_utils import isoformat_utc

_LOADED_AT = datetime.now(UTC).replace(microsecond=0)

PEXELS = "https://images.pexels.com/photos"


def _ago(*, hours: float = 0, minutes: float = 0) -> str:
    return isoformat_utc(_LOADED_AT - timedelta(hours=hours, minutes=minutes))


FALLBACK_NEWS: tuple[NewsArticle, ...] = (
    NewsArticle(
        source=NewsSourceRef(id="techcrunch", name="TechCrunch"),
        author="Sarah Perez",
        title="AI Revolution: How Machine Learning is Transforming Industries",
        description=(
            "Artificial intelligence and machine learning are reshaping everything from "
            "healthcare to finance, creating new opportunities and challenges."
        ),
        url="https://techcrunch.com/ai-revolution",
        url_to_image=f"{PEXELS}/8386440/pexels-photo-8386440.jpeg?auto=compress&cs=tinysrgb&w=800",
        published_at=_ago(hours=2),
        content=(
            "The artificial intelligence revolution is here, and it's transforming "
            "industries at an unprecedented pace..."
        ),
    ),
    NewsArticle(
        source=NewsSourceRef(id="wired", name="Wired"),
        author="Alex Johnson",
        title="The Future of Remote Work: Trends and Technologies",
        description=(
            "As remote work becomes permanent, new technologies and practices are emerging "
            "to support distributed teams."
        ),
        url="https://wired.com/remote-work-future",
        url_to_image=f"{PEXELS}/4226140/pexels-photo-4226140.jpeg?auto=compress&cs=tinysrgb&w=800",
        published_at=_ago(hours=4),
        content=(
            "Remote work has evolved from a temporary pandemic solution to a permanent "
            "fixture of the modern workplace..."
        ),
    ),
    NewsArticle(
        source=NewsSourceRef(id="the-verge", name="The Verge"),
        author="Emma Chen",
        title="Sustainable Technology: Green Innovations for 2024",
        description=(
            "Tech companies are leading the charge in sustainability with innovative "
            "solutions for climate change."
        ),
        url="https://theverge.com/sustainable-tech",
        url_to_image=f"{PEXELS}/9875414/pexels-photo-9875414.jpeg?auto=compress&cs=tinysrgb&w=800",
        published_at=_ago(hours=6),
        content=(
            "The technology sector is embracing sustainability like never before, with "
            "companies investing billions..."
        ),
    ),
    NewsArticle(
        source=NewsSourceRef(id="ars-technica", name="Ars Technica"),
        author="Michael Rodriguez",
        title="Cybersecurity in 2024: New Threats and Defense Strategies",
        description=(
            "As cyber threats evolve, organizations must adapt their security strategies "
            "to protect against sophisticated attacks."
        ),
        url="https://arstechnica.com/cybersecurity-2024",
        url_to_image=(
            f"{PEXELS}/60504/security-protection-anti-virus-software-60504.jpeg"
            "?auto=compress&cs=tinysrgb&w=800"
        ),
        published_at=_ago(hours=8),
        content=(
            "Cybersecurity threats are becoming more sophisticated, requiring organizations "
            "to rethink their defense strategies..."
        ),
    ),
)

FALLBACK_MOVIES: tuple[MovieRecord, ...] = (
    MovieRecord(
        id=1,
        title="The Future of AI",
        overview=(
            "A documentary exploring the potential and challenges of artificial "
            "intelligence in the modern world."
        ),
        poster_path="/ai-documentary.jpg",
        backdrop_path="/ai-backdrop.jpg",
        release_date="2024-01-15",
        vote_average=8.5,
        vote_count=1250,
        genre_ids=(99, 878),
        popularity=95.5,
        original_language="en",
        original_title="The Future of AI",
    ),
    MovieRecord(
        id=2,
        title="Code Warriors",
        overview=(
            "Follow the journey of software developers as they build the next generation "
            "of applications."
        ),
        poster_path="/code-warriors.jpg",
        backdrop_path="/code-backdrop.jpg",
        release_date="2024-02-20",
        vote_average=7.8,
        vote_count=890,
        genre_ids=(99, 18),
        popularity=78.3,
        original_language="en",
        original_title="Code Warriors",
    ),
    MovieRecord(
        id=3,
        title="Digital Revolution",
        overview=(
            "An in-depth look at how digital transformation is reshaping industries "
            "worldwide."
        ),
        poster_path="/digital-revolution.jpg",
        backdrop_path="/digital-backdrop.jpg",
        release_date="2024-03-10",
        vote_average=8.2,
        vote_count=1100,
        genre_ids=(99,),
        popularity=88.7,
        original_language="en",
        original_title="Digital Revolution",
    ),
    MovieRecord(
        id=4,
        title="Startup Dreams",
        overview=(
            "The inspiring stories of entrepreneurs who turned their ideas into successful "
            "businesses."
        ),
        poster_path="/startup-dreams.jpg",
        backdrop_path="/startup-backdrop.jpg",
        release_date="2024-04-05",
        vote_average=7.6,
        vote_count=750,
        genre_ids=(99, 18),
        popularity=72.1,
        original_language="en",
        original_title="Startup Dreams",
    ),
)


def _avatar(photo: str) -> str:
    return f"{PEXELS}/{photo}?auto=compress&cs=tinysrgb&w=100&h=100&dpr=2"


def _image(photo: str) -> str:
    return f"{PEXELS}/{photo}?auto=compress&cs=tinysrgb&w=800"


FALLBACK_SOCIAL_POSTS: tuple[SocialPost, ...] = (
    SocialPost(
        id="social-1",
        username="techguru_sarah",
        display_name="Sarah Tech",
        avatar=_avatar("774909/pexels-photo-774909.jpeg"),
        content=(
            "Just finished implementing a new React dashboard with real-time data fetching! "
            "The user experience is incredible. #ReactJS #WebDev #Dashboard"
        ),
        timestamp=_ago(minutes=30),
        likes=245,
        shares=18,
        comments=32,
        hashtags=("ReactJS", "WebDev", "Dashboard"),
        platform="twitter",
        images=(_image("11035380/pexels-photo-11035380.jpeg"),),
    ),
    SocialPost(
        id="social-2",
        username="designmaster_alex",
        display_name="Alex Design",
        avatar=_avatar("1239291/pexels-photo-1239291.jpeg"),
        content=(
            "Color psychology in UI design is fascinating! Here's how different colors "
            "affect user behavior and engagement. Swipe to see examples!"
        ),
        timestamp=_ago(hours=2),
        likes=189,
        shares=25,
        comments=41,
        hashtags=("UIDesign", "ColorTheory", "UX"),
        platform="instagram",
        images=(
            _image("1629236/pexels-photo-1629236.jpeg"),
            _image("196644/pexels-photo-196644.jpeg"),
        ),
    ),
    SocialPost(
        id="social-3",
        username="startup_mike",
        display_name="Mike Entrepreneur",
        avatar=_avatar("1222271/pexels-photo-1222271.jpeg"),
        content=(
            "Building a successful startup requires more than just a great idea. Here are "
            "5 key lessons I learned from scaling our company to $10M ARR. Thread"
        ),
        timestamp=_ago(hours=4),
        likes=567,
        shares=89,
        comments=78,
        hashtags=("Startup", "Entrepreneurship", "Business"),
        platform="linkedin",
        images=(_image("3184287/pexels-photo-3184287.jpeg"),),
    ),
    SocialPost(
        id="social-4",
        username="ai_researcher_emma",
        display_name="Dr. Emma AI",
        avatar=_avatar("1181686/pexels-photo-1181686.jpeg"),
        content=(
            "Machine learning models are getting more sophisticated, but are we considering "
            "the ethical implications? Important discussion happening in the AI community. "
            "#AI #Ethics #MachineLearning"
        ),
        timestamp=_ago(hours=6),
        likes=423,
        shares=156,
        comments=92,
        hashtags=("AI", "Ethics", "MachineLearning"),
        platform="twitter",
        images=(_image("8386440/pexels-photo-8386440.jpeg"),),
    ),
    SocialPost(
        id="social-5",
        username="remote_work_lisa",
        display_name="Lisa Remote",
        avatar=_avatar("1181424/pexels-photo-1181424.jpeg"),
        content=(
            "Remote work productivity tips that actually work! After 3 years of working "
            "from home, these are my top strategies for staying focused and motivated."
        ),
        timestamp=_ago(hours=8),
        likes=312,
        shares=67,
        comments=45,
        hashtags=("RemoteWork", "Productivity", "WorkFromHome"),
        platform="linkedin",
        images=(_image("4226140/pexels-photo-4226140.jpeg"),),
    ),
    SocialPost(
        id="social-6",
        username="frontend_dev_carlos",
        display_name="Carlos Frontend",
        avatar=_avatar("1043471/pexels-photo-1043471.jpeg"),
        content=(
            "CSS Grid vs Flexbox: When to use which? Here's a comprehensive guide with real "
            "examples! Perfect for developers looking to master modern layouts."
        ),
        timestamp=_ago(hours=10),
        likes=198,
        shares=34,
        comments=28,
        hashtags=("CSS", "WebDev", "Frontend"),
        platform="twitter",
        images=(_image("4164418/pexels-photo-4164418.jpeg"),),
    ),
)
