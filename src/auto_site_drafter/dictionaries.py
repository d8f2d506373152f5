from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .models.industry import FontPairing, IndustryProfile, Palette


@dataclass(frozen=True)
class SectionDefinition:
    kind: str
    label: str
    word_count: int
    image_slot: str | None
    copy_hints: Sequence[str]
    fallback_heading: str
    fallback_body: str
    fallback_subheading: str = ""


@dataclass(frozen=True)
class FeatureRule:
    section: str
    scope: str  # "all" pages or the "primary" page for the section


DEFAULT_SECTIONS: Mapping[str, SectionDefinition] = {
    "hero": SectionDefinition(
        kind="hero",
        label="Hero",
        word_count=40,
        image_slot="hero",
        copy_hints=("One-line value proposition", "Supporting sentence", "Primary call to action"),
        fallback_heading="{business}",
        fallback_subheading="{tagline}",
        fallback_body="{business} helps {audience} with {services_phrase}. {tone_sentence}",
    ),
    "services": SectionDefinition(
        kind="services",
        label="Services",
        word_count=120,
        image_slot="services",
        copy_hints=("Group the offerings", "One benefit per service"),
        fallback_heading="What {business} offers",
        fallback_body="We provide {services_phrase}, each tailored to {audience}.",
    ),
    "about": SectionDefinition(
        kind="about",
        label="About",
        word_count=110,
        image_slot="about",
        copy_hints=("Who the business is", "Why it is different"),
        fallback_heading="About {business}",
        fallback_body="{business} is a {industry} business{location_phrase} focused on {services_phrase}. {tone_sentence}",
    ),
    "testimonials": SectionDefinition(
        kind="testimonials",
        label="Testimonials",
        word_count=80,
        image_slot=None,
        copy_hints=("Two or three short client quotes",),
        fallback_heading="What clients say about {business}",
        fallback_body="Clients choose {business} for dependable results and a {tone_word} experience from start to finish.",
    ),
    "stats": SectionDefinition(
        kind="stats",
        label="Stats",
        word_count=40,
        image_slot=None,
        copy_hints=("Three proof numbers",),
        fallback_heading="{business} by the numbers",
        fallback_body="Years of experience, satisfied clients and projects delivered for {audience}.",
    ),
    "process": SectionDefinition(
        kind="process",
        label="Process",
        word_count=90,
        image_slot=None,
        copy_hints=("Three or four steps",),
        fallback_heading="How working with {business} works",
        fallback_body="We listen, plan, deliver and follow up so every engagement stays clear and predictable.",
    ),
    "team": SectionDefinition(
        kind="team",
        label="Team",
        word_count=80,
        image_slot="team",
        copy_hints=("Introduce the people",),
        fallback_heading="Meet the {business} team",
        fallback_body="Our team brings hands-on {industry} experience to every project.",
    ),
    "gallery": SectionDefinition(
        kind="gallery",
        label="Gallery",
        word_count=30,
        image_slot="gallery",
        copy_hints=("Caption for a visual grid",),
        fallback_heading="A closer look at {business}",
        fallback_body="A selection of recent work and moments from {business}.",
    ),
    "portfolio": SectionDefinition(
        kind="portfolio",
        label="Portfolio",
        word_count=90,
        image_slot="gallery",
        copy_hints=("Highlight two or three projects",),
        fallback_heading="Selected work",
        fallback_body="Recent projects by {business} for {audience}.",
    ),
    "pricing": SectionDefinition(
        kind="pricing",
        label="Pricing",
        word_count=80,
        image_slot=None,
        copy_hints=("Simple plan comparison",),
        fallback_heading="Straightforward pricing",
        fallback_body="Transparent options for {services_phrase}. Contact {business} for a tailored quote.",
    ),
    "faq": SectionDefinition(
        kind="faq",
        label="FAQ",
        word_count=120,
        image_slot=None,
        copy_hints=("Three to five common questions",),
        fallback_heading="Frequently asked questions",
        fallback_body="Answers to the questions {audience} ask {business} most often.",
    ),
    "blog": SectionDefinition(
        kind="blog",
        label="Blog",
        word_count=60,
        image_slot=None,
        copy_hints=("Teaser for recent articles",),
        fallback_heading="Insights from {business}",
        fallback_body="News, guides and ideas from the {business} team.",
    ),
    "location": SectionDefinition(
        kind="location",
        label="Location",
        word_count=40,
        image_slot=None,
        copy_hints=("Address and opening hours",),
        fallback_heading="Visit {business}",
        fallback_body="Find us{location_phrase}. We look forward to welcoming you.",
    ),
    "social": SectionDefinition(
        kind="social",
        label="Social",
        word_count=20,
        image_slot=None,
        copy_hints=("Invite people to follow",),
        fallback_heading="Follow {business}",
        fallback_body="Stay up to date with {business} on social media.",
    ),
    "newsletter": SectionDefinition(
        kind="newsletter",
        label="Newsletter",
        word_count=30,
        image_slot=None,
        copy_hints=("Why subscribe",),
        fallback_heading="Stay in the loop",
        fallback_body="Get occasional updates from {business}, no spam.",
    ),
    "cta": SectionDefinition(
        kind="cta",
        label="Call to action",
        word_count=30,
        image_slot=None,
        copy_hints=("Single clear action",),
        fallback_heading="{cta}",
        fallback_body="Ready to get started? {business} is here to help.",
    ),
    "contact": SectionDefinition(
        kind="contact",
        label="Contact",
        word_count=40,
        image_slot=None,
        copy_hints=("Invite the visitor to reach out",),
        fallback_heading="Get in touch with {business}",
        fallback_body="Tell us about your needs and we will get back to you shortly.{contact_phrase}",
    ),
}


CLOSING_SECTIONS: Sequence[str] = ("cta", "contact")


DEFAULT_PAGE_RECIPES: Mapping[str, Sequence[str]] = {
    "home": ("hero", "services", "about", "testimonials", "contact"),
    "about": ("hero", "about", "team", "testimonials", "cta"),
    "services": ("hero", "services", "process", "faq", "cta"),
    "contact": ("hero", "contact", "location"),
    "portfolio": ("hero", "portfolio", "testimonials", "cta"),
    "pricing": ("hero", "pricing", "faq", "cta"),
    "faq": ("hero", "faq", "contact"),
    "blog": ("hero", "blog", "newsletter", "cta"),
    "team": ("hero", "team", "cta"),
    "testimonials": ("hero", "testimonials", "cta"),
    "generic": ("hero", "about", "cta"),
}


PAGE_TYPE_KEYWORDS: Mapping[str, Sequence[str]] = {
    "home": ("home", "index", "start", "main"),
    "about": ("about", "story", "company", "who we are"),
    "services": ("service", "what we do", "offering", "solutions", "treatments"),
    "contact": ("contact", "get in touch", "booking", "book", "reach us"),
    "portfolio": ("portfolio", "work", "projects", "case stud"),
    "pricing": ("pricing", "plans", "rates", "prices"),
    "faq": ("faq", "questions"),
    "blog": ("blog", "news", "journal", "articles"),
    "team": ("team", "people", "staff"),
    "testimonials": ("testimonials", "reviews"),
}


FEATURE_SECTIONS: Mapping[str, FeatureRule] = {
    "contact form": FeatureRule(section="contact", scope="primary"),
    "contact": FeatureRule(section="contact", scope="primary"),
    "booking": FeatureRule(section="contact", scope="primary"),
    "social links": FeatureRule(section="social", scope="all"),
    "social": FeatureRule(section="social", scope="all"),
    "testimonials": FeatureRule(section="testimonials", scope="primary"),
    "reviews": FeatureRule(section="testimonials", scope="primary"),
    "faq": FeatureRule(section="faq", scope="primary"),
    "gallery": FeatureRule(section="gallery", scope="primary"),
    "portfolio": FeatureRule(section="portfolio", scope="primary"),
    "pricing": FeatureRule(section="pricing", scope="primary"),
    "newsletter": FeatureRule(section="newsletter", scope="all"),
    "map": FeatureRule(section="location", scope="primary"),
    "location": FeatureRule(section="location", scope="primary"),
    "team": FeatureRule(section="team", scope="primary"),
    "stats": FeatureRule(section="stats", scope="primary"),
    "blog": FeatureRule(section="blog", scope="primary"),
}


# Page type where a "primary" scoped section belongs when that page is requested
SECTION_HOME_PAGE: Mapping[str, str] = {
    "contact": "contact",
    "location": "contact",
    "testimonials": "testimonials",
    "faq": "faq",
    "gallery": "portfolio",
    "portfolio": "portfolio",
    "pricing": "pricing",
    "team": "team",
    "blog": "blog",
}


INDUSTRY_PROFILES: Sequence[IndustryProfile] = (
    IndustryProfile(
        id="creative",
        name="Design & Creative Studio",
        keywords=(
            "design studio",
            "design",
            "creative",
            "agency",
            "branding",
            "interior design",
            "architecture",
            "photography",
            "studio",
        ),
        palette=Palette(
            primary="#2B2D42",
            secondary="#8D99AE",
            accent="#EF8354",
            background="#FAFAF7",
            text="#1F2023",
        ),
        fonts=FontPairing(heading="'DM Serif Display', Georgia, serif", body="'Inter', 'Helvetica Neue', sans-serif"),
        border_radius="small",
        shadows="subtle",
        hero_style="full-bleed",
        section_recipe={
            "home": ("hero", "portfolio", "services", "about", "testimonials", "contact"),
            "portfolio": ("hero", "portfolio", "gallery", "cta"),
        },
        imagery={
            "hero": "Bright minimalist design studio with large windows, mood boards and material samples, editorial photography",
            "services": "Designer sketching concepts at a wooden desk, color swatches, natural light",
            "about": "Small creative team collaborating around a table with prototypes, candid editorial style",
            "team": "Portrait of a designer in a light studio, soft daylight, confident expression",
            "gallery": "Finished interior project with curated furniture and art, architectural photography",
        },
        image_style="Editorial, natural light, muted tones with a warm accent",
        tone="Confident, considered, visually articulate",
        power_words=("crafted", "intentional", "distinctive", "timeless", "tailored", "refined"),
        cta_texts=("Start your project", "See our work", "Book a consultation"),
        default_services=("Brand identity", "Spatial design", "Art direction"),
    ),
    IndustryProfile(
        id="restaurant",
        name="Restaurant & Dining",
        keywords=("restaurant", "cafe", "bistro", "dining", "food", "cuisine", "eatery", "kitchen", "chef", "bakery"),
        palette=Palette(
            primary="#8B4513",
            secondary="#2F4F4F",
            accent="#D4AF37",
            background="#FFF8F0",
            text="#2D2D2D",
        ),
        fonts=FontPairing(heading="'Playfair Display', 'Cormorant', serif", body="'Lato', 'Open Sans', sans-serif"),
        border_radius="medium",
        shadows="subtle",
        hero_style="full-bleed",
        section_recipe={
            "home": ("hero", "about", "services", "gallery", "testimonials", "location", "contact"),
        },
        imagery={
            "hero": "Elegant restaurant interior with warm ambient lighting, set tables, candles and wine glasses",
            "services": "Gourmet dish beautifully plated, professional food photography, fresh ingredients",
            "about": "Chef cooking in an open kitchen, flames from the pan, passionate action shot",
            "team": "Restaurant team portrait, chef and staff in uniforms, warm smiles",
            "gallery": "Close-up of seasonal ingredients on a rustic wooden surface",
        },
        image_style="Warm lighting, appetizing colors, shallow depth of field",
        tone="Warm, inviting, sensory, passionate about food",
        power_words=("savor", "crafted", "fresh", "seasonal", "artisan", "signature"),
        cta_texts=("Reserve a table", "View our menu", "Book now"),
        default_services=("Dinner service", "Private dining", "Catering"),
    ),
    IndustryProfile(
        id="legal",
        name="Law Firm & Legal Services",
        keywords=("law firm", "attorney", "lawyer", "legal", "litigation", "counsel", "solicitor"),
        palette=Palette(
            primary="#1B365D",
            secondary="#8B7355",
            accent="#C9A962",
            background="#FFFFFF",
            text="#1A1A1A",
        ),
        fonts=FontPairing(heading="'Libre Baskerville', Georgia, serif", body="'Source Sans Pro', Arial, sans-serif"),
        border_radius="none",
        shadows="subtle",
        hero_style="split",
        section_recipe={
            "home": ("hero", "services", "stats", "about", "testimonials", "contact"),
        },
        imagery={
            "hero": "Modern law office conference room with city view, dark wood furniture, law books",
            "services": "Lawyer reviewing documents at a desk, focused, professional setting",
            "about": "Law firm partners in a meeting, business attire, confident expressions",
            "team": "Professional attorney portrait, business suit, neutral background",
        },
        image_style="Professional, corporate, clean lighting",
        tone="Authoritative, reassuring, precise",
        power_words=("trusted", "experienced", "dedicated", "proven", "strategic", "discreet"),
        cta_texts=("Schedule a consultation", "Speak with an attorney", "Request a case review"),
        default_services=("Civil litigation", "Contract review", "Estate planning"),
    ),
    IndustryProfile(
        id="health",
        name="Health & Medical Practice",
        keywords=("clinic", "medical", "dental", "dentist", "doctor", "health", "therapy", "physio", "wellness", "chiropractic"),
        palette=Palette(
            primary="#0F6E8C",
            secondary="#4DB6AC",
            accent="#FFB74D",
            background="#F7FBFC",
            text="#1D2B33",
        ),
        fonts=FontPairing(heading="'Nunito', 'Segoe UI', sans-serif", body="'Open Sans', Arial, sans-serif"),
        border_radius="large",
        shadows="subtle",
        hero_style="split",
        section_recipe={
            "home": ("hero", "services", "about", "team", "testimonials", "contact"),
        },
        imagery={
            "hero": "Bright modern clinic reception with plants and natural light, calm atmosphere",
            "services": "Caring practitioner with a patient in a clean treatment room",
            "about": "Friendly medical team in a modern practice, reassuring smiles",
            "team": "Portrait of a practitioner in scrubs, approachable expression",
        },
        image_style="Clean, bright, calm, reassuring",
        tone="Caring, clear, reassuring",
        power_words=("gentle", "personalized", "trusted", "comprehensive", "modern", "compassionate"),
        cta_texts=("Book an appointment", "Meet our team", "Call the clinic"),
        default_services=("Consultations", "Preventive care", "Treatment plans"),
    ),
    IndustryProfile(
        id="fitness",
        name="Fitness & Sports",
        keywords=("gym", "fitness", "personal trainer", "yoga", "pilates", "crossfit", "sport", "boxing"),
        palette=Palette(
            primary="#111827",
            secondary="#374151",
            accent="#22C55E",
            background="#0B0F14",
            text="#F9FAFB",
        ),
        fonts=FontPairing(heading="'Oswald', 'Arial Narrow', sans-serif", body="'Roboto', Arial, sans-serif"),
        border_radius="small",
        shadows="dramatic",
        hero_style="full-bleed",
        section_recipe={
            "home": ("hero", "services", "stats", "team", "pricing", "testimonials", "contact"),
        },
        imagery={
            "hero": "Athlete training with intensity in a dark gym, dramatic rim lighting",
            "services": "Group class in motion, energetic atmosphere, motion blur",
            "about": "Coach guiding a client through a lift, focused and supportive",
            "team": "Portrait of a personal trainer, arms crossed, confident",
        },
        image_style="High contrast, dramatic lighting, energetic",
        tone="Energetic, motivating, direct",
        power_words=("stronger", "results", "unstoppable", "transform", "push", "progress"),
        cta_texts=("Start your free trial", "Join today", "Book a session"),
        default_services=("Personal training", "Group classes", "Nutrition coaching"),
    ),
    IndustryProfile(
        id="technology",
        name="Technology & SaaS",
        keywords=("software", "saas", "startup", "tech", "app", "platform", "ai", "it services", "cloud"),
        palette=Palette(
            primary="#4F46E5",
            secondary="#0EA5E9",
            accent="#F59E0B",
            background="#FFFFFF",
            text="#0F172A",
        ),
        fonts=FontPairing(heading="'Poppins', 'Segoe UI', sans-serif", body="'Inter', Arial, sans-serif"),
        border_radius="large",
        shadows="medium",
        hero_style="gradient",
        section_recipe={
            "home": ("hero", "stats", "services", "process", "testimonials", "pricing", "cta"),
        },
        imagery={
            "hero": "Abstract product dashboard floating over a soft gradient, clean UI",
            "services": "Team collaborating around laptops in a bright modern office",
            "about": "Founders whiteboarding a product roadmap, candid",
            "team": "Portrait of an engineer at a standing desk, friendly",
        },
        image_style="Clean, modern, gradient accents",
        tone="Clear, optimistic, benefit-driven",
        power_words=("seamless", "automate", "scale", "insight", "secure", "effortless"),
        cta_texts=("Start free", "Request a demo", "See pricing"),
        default_services=("Platform", "Integrations", "Support"),
    ),
    IndustryProfile(
        id="home_services",
        name="Home Services & Construction",
        keywords=("plumbing", "plumber", "electrician", "construction", "roofing", "contractor", "renovation", "landscaping", "cleaning", "hvac"),
        palette=Palette(
            primary="#1E3A5F",
            secondary="#F2A541",
            accent="#E4572E",
            background="#FFFFFF",
            text="#222222",
        ),
        fonts=FontPairing(heading="'Montserrat', Arial, sans-serif", body="'Open Sans', Arial, sans-serif"),
        border_radius="small",
        shadows="medium",
        hero_style="split",
        section_recipe={
            "home": ("hero", "services", "stats", "process", "testimonials", "contact"),
        },
        imagery={
            "hero": "Professional tradesperson at work on a residential job site, bright daylight",
            "services": "Close-up of tools and quality workmanship, clean finish",
            "about": "Crew in branded uniforms beside a service van, friendly",
            "team": "Portrait of a contractor with a hard hat, trustworthy",
        },
        image_style="Bright, honest, documentary",
        tone="Dependable, straightforward, friendly",
        power_words=("licensed", "reliable", "on-time", "guaranteed", "local", "upfront"),
        cta_texts=("Get a free quote", "Call now", "Schedule service"),
        default_services=("Repairs", "Installations", "Maintenance"),
    ),
    IndustryProfile(
        id="beauty",
        name="Beauty & Salon",
        keywords=("salon", "spa", "beauty", "hair", "barber", "nails", "skincare", "makeup"),
        palette=Palette(
            primary="#7A4E5B",
            secondary="#D8B4A0",
            accent="#C08497",
            background="#FFF9F7",
            text="#3A2E33",
        ),
        fonts=FontPairing(heading="'Cormorant Garamond', Georgia, serif", body="'Montserrat', Arial, sans-serif"),
        border_radius="large",
        shadows="subtle",
        hero_style="full-bleed",
        section_recipe={
            "home": ("hero", "services", "gallery", "pricing", "testimonials", "contact"),
        },
        imagery={
            "hero": "Serene salon interior with soft pink tones, mirrors and fresh flowers",
            "services": "Stylist working on a client's hair, soft natural light",
            "about": "Spa treatment room with candles and towels, calm",
            "team": "Portrait of a smiling stylist holding scissors",
            "gallery": "Before and after styling results, soft studio light",
        },
        image_style="Soft, luminous, elegant",
        tone="Pampering, elegant, welcoming",
        power_words=("radiant", "indulge", "renew", "signature", "luxurious", "glow"),
        cta_texts=("Book your visit", "View treatments", "Reserve now"),
        default_services=("Cuts and styling", "Color", "Treatments"),
    ),
    IndustryProfile(
        id="business",
        name="Professional Business",
        keywords=("consulting", "business", "services", "company", "firm", "accounting", "finance"),
        palette=Palette(
            primary="#1F4E79",
            secondary="#5B7C99",
            accent="#F4A259",
            background="#FFFFFF",
            text="#1E1E1E",
        ),
        fonts=FontPairing(heading="'Merriweather', Georgia, serif", body="'Source Sans Pro', Arial, sans-serif"),
        border_radius="medium",
        shadows="subtle",
        hero_style="split",
        section_recipe={},
        imagery={
            "hero": "Modern office with a team in discussion, natural light, professional",
            "services": "Professional presenting to clients at a meeting table",
            "about": "Company team photo in a bright workspace",
            "team": "Professional headshot, neutral background, approachable",
        },
        image_style="Professional, clean, natural light",
        tone="Professional, approachable, clear",
        power_words=("reliable", "expert", "tailored", "proven", "responsive", "trusted"),
        cta_texts=("Get in touch", "Request a quote", "Learn more"),
        default_services=("Consulting", "Planning", "Support"),
    ),
)


DEFAULT_PROFILE_ID = "business"


__all__ = [
    "DEFAULT_SECTIONS",
    "DEFAULT_PAGE_RECIPES",
    "PAGE_TYPE_KEYWORDS",
    "FEATURE_SECTIONS",
    "SECTION_HOME_PAGE",
    "CLOSING_SECTIONS",
    "INDUSTRY_PROFILES",
    "DEFAULT_PROFILE_ID",
    "SectionDefinition",
    "FeatureRule",
]
