# locked_preview/core/definitions.py

"""Field roles, rule kinds and placeholder literals for locked previews."""


class FieldRole:
    """Semantic roles a record field can play in the replacement table."""

    # Short identifying text
    LOCKED_TEXT = "locked_text"
    NAME = "name"
    PROFESSION = "profession"

    # Contact fields
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"
    LOCATION = "location"
    LINKEDIN = "linkedin"
    GITHUB = "github"
    WEBSITE = "website"
    SOCIAL_HANDLE = "social_handle"
    YOUTUBE = "youtube"
    FACEBOOK = "facebook"

    # Long narrative text
    NARRATIVE = "narrative"

    # Media references
    MEDIA = "media"

    # Sub-record fields
    DATE = "date"
    FLAG = "flag"
    REFERENCE = "reference"
    COMPANY = "company"
    INSTITUTION = "institution"
    ISSUER = "issuer"
    ORGANIZATION = "organization"
    TECH_STACK = "tech_stack"
    PROFICIENCY = "proficiency"

    # Containers
    TOKEN_LIST = "token_list"
    PERSONAL_INFO = "personal_info"
    EXPERIENCE_LIST = "experience_list"
    EDUCATION_LIST = "education_list"
    PROJECT_LIST = "project_list"
    LANGUAGE_LIST = "language_list"
    CERTIFICATION_LIST = "certification_list"
    ACHIEVEMENT_LIST = "achievement_list"
    VOLUNTEER_LIST = "volunteer_list"


class RuleKind:
    """Replacement strategies a role can map to."""

    MASK = "mask"
    BLANK = "blank"
    CLEAR = "clear"
    RESET = "reset"
    TOKENS = "tokens"
    RECORD = "record"
    RECORDS = "records"

    ALL = frozenset({MASK, BLANK, CLEAR, RESET, TOKENS, RECORD, RECORDS})

    # Kinds that recurse into a named schema
    NESTED = frozenset({RECORD, RECORDS})


# Schema applied to the top level of a source record
ROOT_SCHEMA = "resume"

# Fallback token for fields with no entry in the table
LOCK_PLACEHOLDER = "[Locked Preview]"

# Top-level sections of a locked record in their empty form, served when
# the replacement table cannot be used at all
EMPTY_LOCKED_RECORD = {
    "title": "",
    "personal_info": {},
    "professional_summary": "",
    "experience": [],
    "education": [],
    "projects": [],
    "skills": [],
    "soft_skills": [],
    "languages": [],
    "certifications": [],
    "achievements": [],
    "volunteer_work": [],
}

# Peak opacity of the fade mask at the nominal blur boundary
MASK_BOUNDARY_OPACITY = 0.4

# Highlight gradient starts this much below the configured opacity
HIGHLIGHT_FALLOFF = 0.2
