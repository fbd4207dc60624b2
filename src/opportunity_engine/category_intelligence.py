"""
Category Intelligence Table

Static per-category profiles used by the scoring and finance engines:
- Difficulty, capital need and operational complexity
- Growth bias and category ease score
- Key success factors and common challenges

Lookups are total: an unknown category resolves to DEFAULT_PROFILE.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .models import Difficulty, Level, _label_key

logger = logging.getLogger(__name__)


class CategoryId(str, Enum):
    """Closed set of category identifiers"""
    FOOD_BEVERAGE = "food-beverage"
    RETAIL = "retail"
    TECHNOLOGY = "technology"
    TECH_AI_ML = "tech-ai-ml"
    TECH_FINTECH = "tech-fintech"
    TECH_EDTECH = "tech-edtech"
    TECH_HEALTHTECH = "tech-healthtech"
    EDUCATION = "education"
    HEALTH_WELLNESS = "health-wellness"
    SERVICES = "services"
    MANUFACTURING = "manufacturing"
    LOGISTICS = "logistics"
    HOSPITALITY = "hospitality"
    AUTOMOTIVE = "automotive"
    AGRICULTURE = "agriculture"
    FINANCE = "finance"
    MEDIA_ENTERTAINMENT = "media-entertainment"
    BEAUTY_PERSONAL_CARE = "beauty-personal-care"
    REAL_ESTATE = "real-estate"
    SPORTS_FITNESS = "sports-fitness"
    HOME_LIFESTYLE = "home-lifestyle"
    LEGAL_COMPLIANCE = "legal-compliance"
    ENTERTAINMENT = "entertainment"


@dataclass(frozen=True)
class CategoryProfile:
    """Qualitative attributes of a business category"""
    difficulty: Level
    capital_need: Level
    operational_complexity: Level
    customer_profile: str
    required_footfall: str  # Low / Moderate / High / Very High
    growth_bias: float  # growth multiplier, 0.8 - 1.5
    category_ease_score: int  # 0-100, inverse of difficulty
    pricing_segment: str  # Budget / Mid-Range / Premium / Luxury
    key_success_factors: Tuple[str, ...]
    common_challenges: Tuple[str, ...]

    @property
    def difficulty_tier(self) -> Difficulty:
        return Difficulty.parse(self.difficulty)


def _profile(difficulty, capital, complexity, customers, footfall, growth_bias,
             ease, pricing, factors, challenges) -> CategoryProfile:
    return CategoryProfile(
        difficulty=Level(difficulty),
        capital_need=Level(capital),
        operational_complexity=Level(complexity),
        customer_profile=customers,
        required_footfall=footfall,
        growth_bias=growth_bias,
        category_ease_score=ease,
        pricing_segment=pricing,
        key_success_factors=tuple(factors),
        common_challenges=tuple(challenges),
    )


DEFAULT_PROFILE = _profile(
    "Medium", "Medium", "Medium", "General consumers", "Moderate", 1.0, 65, "Mid-Range",
    ["Quality products/services", "Customer satisfaction", "Competitive pricing", "Strategic location"],
    ["Competition", "Market volatility", "Customer acquisition", "Operational efficiency"],
)


CATEGORY_PROFILES: Dict[CategoryId, CategoryProfile] = {
    CategoryId.FOOD_BEVERAGE: _profile(
        "Medium", "Medium", "High",
        "Diverse demographics, youth + working professionals", "High", 1.15, 65, "Mid-Range",
        ["Prime location with high footfall", "Quality & consistency", "Hygiene standards", "Quick service"],
        ["High operational costs", "Food safety compliance", "Staff management", "Inventory wastage"],
    ),
    CategoryId.RETAIL: _profile(
        "Medium", "High", "Medium",
        "General consumers, families, working professionals", "Moderate", 1.0, 70, "Mid-Range",
        ["Product variety", "Inventory management", "Customer service", "Competitive pricing"],
        ["High initial inventory investment", "Managing stock turnover",
         "Competition from e-commerce", "Seasonal demand fluctuations"],
    ),
    CategoryId.TECHNOLOGY: _profile(
        "High", "High", "Very High",
        "Tech-savvy professionals, businesses, students", "Low", 1.25, 55, "Premium",
        ["Technical expertise", "Innovation & adaptation", "After-sales support", "Strategic partnerships"],
        ["Rapid technology changes", "High skill requirements", "Intense competition", "High R&D costs"],
    ),
    CategoryId.TECH_AI_ML: _profile(
        "Very High", "Very High", "Very High",
        "Enterprises, tech companies, research institutions", "Low", 1.35, 40, "Luxury",
        ["Deep technical expertise in AI/ML", "Research & development capability",
         "High-quality data access", "Computing infrastructure"],
        ["Extremely high skill requirements", "Expensive compute resources",
         "Rapidly evolving field", "Talent acquisition & retention"],
    ),
    CategoryId.TECH_FINTECH: _profile(
        "Very High", "Very High", "Very High",
        "Banks, financial institutions, consumers", "Low", 1.40, 35, "Premium",
        ["Regulatory compliance expertise", "Security & data protection",
         "Financial domain knowledge", "Trust & credibility"],
        ["Complex regulatory environment", "High compliance costs",
         "Security risks & fraud prevention", "Building user trust"],
    ),
    CategoryId.TECH_EDTECH: _profile(
        "High", "High", "High",
        "Students, educational institutions, professionals", "Low", 1.30, 50, "Mid-Range",
        ["Quality content creation", "User engagement & retention",
         "Measurable learning outcomes", "Scalable platform"],
        ["Content development costs", "Competition from free resources",
         "User engagement challenges", "Market saturation"],
    ),
    CategoryId.TECH_HEALTHTECH: _profile(
        "Very High", "Very High", "Very High",
        "Healthcare providers, patients, hospitals", "Low", 1.32, 38, "Premium",
        ["Healthcare regulatory compliance", "Data privacy & HIPAA standards",
         "Clinical validation", "Medical expertise partnerships"],
        ["Strict regulatory approvals", "Patient data security",
         "Medical liability concerns", "Long sales cycles"],
    ),
    CategoryId.EDUCATION: _profile(
        "Medium", "Medium", "High",
        "Students, parents, working professionals seeking upskilling", "Moderate", 1.18, 60, "Mid-Range",
        ["Quality instructors", "Proven curriculum", "Certifications & outcomes", "Infrastructure & facilities"],
        ["Regulatory compliance", "Teacher retention", "Seasonal enrollment patterns", "Building reputation"],
    ),
    CategoryId.HEALTH_WELLNESS: _profile(
        "High", "Very High", "Very High",
        "Health-conscious individuals, families, elderly", "Moderate", 1.20, 50, "Premium",
        ["Qualified professionals", "Certifications & licenses", "Hygiene & safety", "Trust & reputation"],
        ["Strict regulatory requirements", "High liability risks",
         "Equipment & maintenance costs", "Insurance complexities"],
    ),
    CategoryId.SERVICES: _profile(
        "Low", "Low", "Low",
        "General consumers, households, businesses", "Low", 1.08, 80, "Budget",
        ["Skill & expertise", "Customer satisfaction", "Flexible scheduling", "Word-of-mouth referrals"],
        ["Building initial client base", "Managing appointments", "Pricing competition", "Scaling operations"],
    ),
    CategoryId.MANUFACTURING: _profile(
        "High", "Very High", "High",
        "Wholesalers, retailers, B2B clients, exporters", "Low", 1.10, 48, "Mid-Range",
        ["Production capacity", "Quality control", "Supply chain efficiency", "Cost management"],
        ["High capital investment", "Raw material price volatility",
         "Labor management", "Environmental regulations"],
    ),
    CategoryId.LOGISTICS: _profile(
        "Medium", "High", "High",
        "E-commerce, businesses, individuals, corporates", "Low", 1.22, 58, "Mid-Range",
        ["Fleet management", "Technology integration", "Timely deliveries", "Cost optimization"],
        ["Fuel cost fluctuations", "Vehicle maintenance", "Route optimization", "Competition pricing"],
    ),
    CategoryId.HOSPITALITY: _profile(
        "High", "Very High", "High",
        "Travelers, tourists, business professionals, event planners", "Moderate", 1.15, 55, "Premium",
        ["Service excellence", "Cleanliness & hygiene", "Location & accessibility", "Online reputation"],
        ["High fixed costs", "Staff training & retention", "Seasonal fluctuations", "Regulatory compliance"],
    ),
    CategoryId.AUTOMOTIVE: _profile(
        "Medium", "High", "Medium",
        "Vehicle owners, fleet operators, corporates", "Moderate", 1.12, 62, "Mid-Range",
        ["Technical expertise", "Genuine parts availability", "Quick turnaround time", "Warranty & guarantees"],
        ["Skilled technician shortage", "Parts inventory management",
         "Technology upgrades", "Customer trust building"],
    ),
    CategoryId.AGRICULTURE: _profile(
        "High", "High", "Very High",
        "Farmers, agri-businesses, food processors", "Low", 1.08, 45, "Budget",
        ["Agricultural knowledge", "Weather management", "Market linkages", "Government schemes access"],
        ["Weather dependency", "Market price fluctuations", "Storage & wastage", "Working capital needs"],
    ),
    CategoryId.FINANCE: _profile(
        "Very High", "High", "Very High",
        "Individuals, businesses, HNIs, institutions", "Low", 1.28, 42, "Premium",
        ["Regulatory compliance", "Trust & credibility", "Financial expertise", "Risk management"],
        ["Strict RBI/SEBI regulations", "Capital adequacy requirements", "NPA management", "Compliance costs"],
    ),
    CategoryId.MEDIA_ENTERTAINMENT: _profile(
        "Medium", "High", "Medium",
        "Youth, content consumers, advertisers, brands", "Low", 1.18, 65, "Mid-Range",
        ["Creative talent", "Content quality", "Audience engagement", "Distribution channels"],
        ["Content production costs", "Copyright & licensing", "Monetization challenges", "Audience retention"],
    ),
    CategoryId.BEAUTY_PERSONAL_CARE: _profile(
        "Medium", "Medium", "Medium",
        "Men, women, professionals, social events attendees", "Moderate", 1.14, 68, "Mid-Range",
        ["Skilled professionals", "Hygiene standards", "Product quality", "Customer experience"],
        ["Staff training & retention", "Competition saturation", "Trend changes", "Client loyalty building"],
    ),
    CategoryId.REAL_ESTATE: _profile(
        "High", "Very High", "High",
        "Property buyers, investors, corporates, NRIs", "Low", 1.16, 52, "Premium",
        ["Market knowledge", "Trust & transparency", "Legal expertise", "Network & connections"],
        ["RERA compliance", "High transaction values", "Market cyclicality", "Payment collection"],
    ),
    CategoryId.SPORTS_FITNESS: _profile(
        "Medium", "High", "Medium",
        "Youth, fitness enthusiasts, athletes, parents", "Moderate", 1.20, 64, "Mid-Range",
        ["Qualified trainers", "Quality equipment", "Result-oriented programs", "Safety protocols"],
        ["Equipment costs", "Trainer retention", "Membership churn", "Space requirements"],
    ),
    CategoryId.HOME_LIFESTYLE: _profile(
        "Medium", "High", "Medium",
        "Homeowners, interior designers, newlyweds", "Moderate", 1.10, 66, "Mid-Range",
        ["Product variety", "Design aesthetics", "Quality & durability", "After-sales service"],
        ["Inventory costs", "Trend sensitivity", "E-commerce competition", "Logistics management"],
    ),
    CategoryId.LEGAL_COMPLIANCE: _profile(
        "Very High", "Medium", "Very High",
        "Businesses, individuals, corporates, startups", "Low", 1.12, 44, "Premium",
        ["Legal expertise", "Professional reputation", "Client confidentiality", "Case success rate"],
        ["Long qualification period", "Building reputation", "Client acquisition costs", "Professional indemnity"],
    ),
    CategoryId.ENTERTAINMENT: _profile(
        "Medium", "High", "Medium",
        "Youth, families, tourists, event organizers", "High", 1.12, 65, "Mid-Range",
        ["Unique experience", "Marketing & promotions", "Location accessibility", "Safety & comfort"],
        ["Seasonal demand", "High operational costs", "Entertainment licenses", "Trend sensitivity"],
    ),
}


# Annual market growth rates used by the forecast
CATEGORY_GROWTH_RATES: Dict[CategoryId, float] = {
    CategoryId.FOOD_BEVERAGE: 0.15,
    CategoryId.RETAIL: 0.10,
    CategoryId.TECHNOLOGY: 0.25,
    CategoryId.EDUCATION: 0.18,
    CategoryId.HEALTH_WELLNESS: 0.20,
    CategoryId.SERVICES: 0.12,
    CategoryId.ENTERTAINMENT: 0.14,
    CategoryId.HOSPITALITY: 0.16,
}
DEFAULT_GROWTH_RATE = 0.12


# Business types people actually type, mapped onto a category
BUSINESS_TYPE_ALIASES: Dict[str, CategoryId] = {
    "cafe": CategoryId.FOOD_BEVERAGE,
    "café": CategoryId.FOOD_BEVERAGE,
    "restaurant": CategoryId.FOOD_BEVERAGE,
    "cloud kitchen": CategoryId.FOOD_BEVERAGE,
    "bakery": CategoryId.FOOD_BEVERAGE,
    "fast food": CategoryId.FOOD_BEVERAGE,
    "juice bar": CategoryId.FOOD_BEVERAGE,
    "bar": CategoryId.FOOD_BEVERAGE,
    "grocery store": CategoryId.RETAIL,
    "pharmacy": CategoryId.RETAIL,
    "supermarket": CategoryId.RETAIL,
    "bookstore": CategoryId.RETAIL,
    "electronics store": CategoryId.RETAIL,
    "fashion boutique": CategoryId.RETAIL,
    "tech support": CategoryId.TECHNOLOGY,
    "it support": CategoryId.TECHNOLOGY,
    "software development": CategoryId.TECHNOLOGY,
    "digital marketing agency": CategoryId.TECHNOLOGY,
    "tutoring center": CategoryId.EDUCATION,
    "coaching center": CategoryId.EDUCATION,
    "preschool": CategoryId.EDUCATION,
    "clinic": CategoryId.HEALTH_WELLNESS,
    "yoga studio": CategoryId.HEALTH_WELLNESS,
    "gym": CategoryId.SPORTS_FITNESS,
    "fitness center": CategoryId.SPORTS_FITNESS,
    "salon": CategoryId.BEAUTY_PERSONAL_CARE,
    "spa": CategoryId.BEAUTY_PERSONAL_CARE,
    "laundry": CategoryId.SERVICES,
    "hotel": CategoryId.HOSPITALITY,
    "guest house": CategoryId.HOSPITALITY,
    "car service center": CategoryId.AUTOMOTIVE,
    "event management": CategoryId.ENTERTAINMENT,
}


def resolve_category(category) -> Optional[CategoryId]:
    """
    Resolve a category id or business type to a CategoryId.

    Returns None when nothing matches; callers fall back to defaults.
    """
    if isinstance(category, CategoryId):
        return category
    if not isinstance(category, str):
        return None

    text = category.strip().lower()
    try:
        return CategoryId(text)
    except ValueError:
        pass

    if text in BUSINESS_TYPE_ALIASES:
        return BUSINESS_TYPE_ALIASES[text]

    key = _label_key(text)
    for member in CategoryId:
        if key in (_label_key(member.value), _label_key(member.name)):
            return member
    for alias, member in BUSINESS_TYPE_ALIASES.items():
        if key == _label_key(alias):
            return member
    return None


def profile_for(category) -> CategoryProfile:
    """Look up a category profile; unknown categories get DEFAULT_PROFILE"""
    category_id = resolve_category(category)
    if category_id is None:
        logger.debug(f"Unknown category {category!r}, using default profile")
        return DEFAULT_PROFILE
    return CATEGORY_PROFILES[category_id]


def annual_growth_rate(category) -> float:
    """Annual market growth rate for a category (default 12%)"""
    category_id = resolve_category(category)
    return CATEGORY_GROWTH_RATES.get(category_id, DEFAULT_GROWTH_RATE)


# Standalone difficulty -> ease mapping. Profiles carry their own curated
# category_ease_score, which disagrees with this table for several categories.
DIFFICULTY_EASE_SCORES = {
    Difficulty.EASY: 85,
    Difficulty.MODERATE: 65,
    Difficulty.DIFFICULT: 45,
    Difficulty.VERY_DIFFICULT: 25,
}


def ease_score_for_difficulty(difficulty) -> int:
    """Ease score for a difficulty tier (Low/Medium/High/Very High or Easy..Very Difficult)"""
    try:
        return DIFFICULTY_EASE_SCORES[Difficulty.parse(difficulty)]
    except ValueError:
        logger.debug(f"Unknown difficulty {difficulty!r}, using medium ease")
        return DIFFICULTY_EASE_SCORES[Difficulty.MODERATE]
