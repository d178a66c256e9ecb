"""Prompt text the operator copies into a chat assistant, and parsing of what comes back.

The JSON shape requested by the discovery prompts is the shape
``normalizer.normalize_lead`` reads; change both together.
"""
from __future__ import annotations

import json
import re
from typing import Optional, Tuple

from .models import EmailType, Lead

CREATOR_NAME = "Michelle Choe"
CREATOR_FIRST_NAME = CREATOR_NAME.split()[0]

CREATOR_CONTEXT = f"""
{CREATOR_NAME} is a lifestyle and UGC (user-generated content) creator with:
- YouTube: 36K subscribers
- Instagram: 10K followers
- TikTok: 15K followers

Her aesthetic is soft, neutral, cozy luxury - think Pottery Barn meets Korean minimalism.

Past brand partners include:
- Pottery Barn
- YSL Beauty
- Maybelline
- Target
- Jo Malone
- Poppui

She creates authentic, aesthetic content in categories: home decor, beauty, skincare, lifestyle, wellness, and fashion.
""".strip()

DEFAULT_SUBJECT = f"Partnership Opportunity with {CREATOR_NAME}"
FOLLOWUP_SUBJECT = f"Partnership with {CREATOR_NAME}"

SIGN_OFF = f"Best,\n{CREATOR_FIRST_NAME}"


def lead_json_example(category: str = "category", why_good_fit: str = "", suggested_collab: str = "") -> str:
    """One-element example of the array the importer accepts."""
    example = [
        {
            "company_name": "Brand Name",
            "website": "https://brandwebsite.com",
            "contact_email": "",
            "category": category,
            "socials": {"instagram": "@handle", "tiktok": "@handle", "youtube": ""},
            "why_good_fit": why_good_fit or f"Brief 1-2 sentence explanation of why this brand aligns with {CREATOR_FIRST_NAME}'s aesthetic and audience",
            "suggested_collab": suggested_collab or f"Brief idea for what kind of content {CREATOR_FIRST_NAME} could create",
        }
    ]
    return "```json\n" + json.dumps(example, indent=2) + "\n```"


def lead_discovery_prompt(category: str, count: int = 25) -> str:
    category = category.strip() or "lifestyle"
    return f"""{CREATOR_CONTEXT}

I need you to find {count} brands in the "{category}" category that would be great partnership opportunities for {CREATOR_FIRST_NAME}.

For EACH brand, provide the following in this EXACT JSON format (this is critical for importing):

{lead_json_example(category=category)}

Put a contact email (pr@ or marketing@) in contact_email if you can find one, otherwise leave it as an empty string.

Focus on:
- DTC (direct-to-consumer) brands that actively work with creators
- Brands with clean, aesthetic visual identity
- Companies that align with {CREATOR_FIRST_NAME}'s neutral, cozy, elevated lifestyle aesthetic
- Mix of established brands and emerging brands
- Brands that have worked with similar creators before

Return ONLY the JSON array, no other text. Make sure it's valid JSON I can parse."""


def competitor_lookup_prompt(brand_name: str) -> str:
    return f"""{CREATOR_CONTEXT}

The brand "{brand_name}" has worked with {CREATOR_FIRST_NAME} or is a dream partner for her.

Find 15-20 similar brands that:
1. Are in the same category/industry
2. Have a similar aesthetic or target demographic
3. Are known to work with creators/influencers
4. Would be receptive to UGC partnerships

Return in this EXACT JSON format:

{lead_json_example(why_good_fit=f"Similar to {brand_name} because...", suggested_collab="Content idea")}

Return ONLY the JSON array, no other text."""


def pitch_prompt(company_name: str, category: str, website: Optional[str] = None) -> str:
    site = f", website: {website}" if website else ""
    return f"""{CREATOR_CONTEXT}

Write a personalized partnership pitch for {CREATOR_FIRST_NAME} to send to {company_name} ({category} brand{site}).

The pitch should:
- Be warm, professional, and authentic (not salesy)
- Reference something specific about the brand that shows {CREATOR_FIRST_NAME} has done her research
- Highlight why {CREATOR_FIRST_NAME}'s audience and aesthetic align with the brand
- Suggest a specific content idea or collaboration format
- Be concise (under 150 words)

Return ONLY the pitch text, no other formatting or explanation."""


def outreach_email_prompt(lead: Lead) -> str:
    contact = f" (contact: {lead.contact_name})" if lead.contact_name else ""
    if lead.ai_pitch:
        angle = f'Use this pitch angle: "{lead.ai_pitch}"'
    else:
        angle = f"The brand is in the {lead.category.value} category."

    return f"""{CREATOR_CONTEXT}

TASK: Write a cold outreach email to {lead.company_name}{contact}.

{angle}

Email requirements:
- Subject line that gets opened (intriguing but not clickbait)
- Warm, friendly opening that feels personal
- Brief intro of {CREATOR_FIRST_NAME} (1-2 sentences max)
- Specific content idea for this brand
- Clear but soft call-to-action
- Professional sign-off
- Total length: 150-200 words max

IMPORTANT: The tone should be warm, authentic, and confident - not salesy or desperate.

Return in this exact format:
SUBJECT: [subject line]

[email body]

{SIGN_OFF}"""


def followup_email_prompt(lead: Lead, followup_number: int, original_subject: str = FOLLOWUP_SUBJECT) -> str:
    if followup_number not in (1, 2):
        raise ValueError(f"followup_number must be 1 or 2, got {followup_number}")

    if followup_number == 1:
        context = f"{CREATOR_FIRST_NAME} sent an initial outreach email a few days ago with no response yet."
        requirements = (
            "- Keep it SHORT (under 100 words)\n"
            "- Friendly and helpful, not pushy\n"
            "- Add a small piece of new value (a recent piece of content, or a new idea)\n"
            "- Gentle nudge without guilt-tripping\n"
            "- Leave room for another follow-up if needed"
        )
    else:
        context = (
            f"{CREATOR_FIRST_NAME} has sent one initial email and one follow-up with no response. "
            "This is the last follow-up."
        )
        requirements = (
            "- Very short (under 75 words)\n"
            '- Gracefully give them an "out" while leaving the door open\n'
            "- No guilt or pressure\n"
            "- Professional and kind\n"
            "- Mention she'll reach out in the future if timing is better"
        )

    return f"""{CREATOR_CONTEXT}

Write follow-up email #{followup_number} for {CREATOR_FIRST_NAME} to send to {lead.company_name}.

Context: {context}

Original email subject was: "{original_subject}"

Requirements:
{requirements}
- Reference the original email naturally

Return in this format:
SUBJECT: Re: {original_subject}

[email body]

{SIGN_OFF}"""


def email_prompt_for(lead: Lead, email_type: EmailType | str, original_subject: str = FOLLOWUP_SUBJECT) -> str:
    email_type = EmailType(email_type)
    if email_type == EmailType.FOLLOWUP1:
        return followup_email_prompt(lead, 1, original_subject)
    if email_type == EmailType.FOLLOWUP2:
        return followup_email_prompt(lead, 2, original_subject)
    # Negotiation and contract emails start from the outreach brief
    return outreach_email_prompt(lead)


_SUBJECT_RE = re.compile(r"^[ \t]*SUBJECT:[ \t]*(.*?)[ \t]*$", re.IGNORECASE | re.MULTILINE)


def parse_email_draft(text: str) -> Tuple[str, str]:
    """Split a pasted ``SUBJECT: ...`` draft into (subject, body)."""
    match = _SUBJECT_RE.search(text)
    if not match:
        return DEFAULT_SUBJECT, text.strip()
    # Anything before the SUBJECT line is assistant preamble
    return match.group(1) or DEFAULT_SUBJECT, text[match.end():].strip()
