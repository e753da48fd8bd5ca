"""
Pydantic Schemas - Request/Response Validation

All admin API request and response schemas in one file for simplicity.
Amounts travel as decimal floats; the database keeps integer cents.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Any, Dict, Generic, TypeVar
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserType(str, Enum):
    professional = "professional"
    company = "company"
    admin = "admin"


class UserStatus(str, Enum):
    active = "active"
    blocked = "blocked"


class CompanySize(str, Enum):
    small = "small"
    medium = "medium"
    large = "large"
    enterprise = "enterprise"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"
    freelance = "freelance"


class JobStatus(str, Enum):
    open = "open"
    active = "active"
    closed = "closed"
    filled = "filled"
    expired = "expired"


class ResourceType(str, Enum):
    article = "article"
    template = "template"
    video = "video"
    webinar = "webinar"
    course = "course"


class SubscriptionStatus(str, Enum):
    active = "active"
    trialing = "trialing"
    past_due = "past_due"
    canceled = "canceled"


class PaymentType(str, Enum):
    subscription = "subscription"
    consultation = "consultation"


class PaymentStatus(str, Enum):
    pending = "pending"
    succeeded = "succeeded"
    failed = "failed"
    refunded = "refunded"
    partially_refunded = "partially_refunded"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


# ============================================================
# GENERIC SCHEMAS
# ============================================================

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int


class MessageResponse(BaseModel):
    message: str
    success: bool = True


class PanelResponse(BaseModel):
    key: str
    title: str
    endpoint: str


# ============================================================
# AUTH SCHEMAS
# ============================================================

class AdminLoginRequest(BaseModel):
    username_or_email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    username: str


class AdminMeResponse(BaseModel):
    user_id: int
    username: str
    email: str
    user_type: str
    is_admin: bool


# ============================================================
# USER SCHEMAS
# ============================================================

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    user_type: UserType
    is_admin: bool = False


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    user_type: Optional[UserType] = None
    is_admin: Optional[bool] = None


class SuspendRequest(BaseModel):
    reason: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    user_type: str
    is_admin: bool
    blocked: bool
    blocked_reason: Optional[str] = None
    created_at: datetime
    last_login: Optional[datetime] = None


class ActivityEntry(BaseModel):
    id: str
    action: str
    admin_username: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[Any] = None
    details: Optional[Dict[str, Any]] = None
    method: Optional[str] = None
    path: Optional[str] = None
    status_code: Optional[int] = None
    timestamp: datetime


class UserDetailResponse(BaseModel):
    user: UserResponse
    profile: Optional[Dict[str, Any]] = None
    activity: List[ActivityEntry] = []


# ============================================================
# PROFESSIONAL PROFILE SCHEMAS
# ============================================================

class ProfessionalResponse(BaseModel):
    id: int
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    title: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    rate_per_hour: Optional[int] = None
    years_experience: Optional[int] = 0
    rating: Optional[int] = 0
    review_count: Optional[int] = 0
    featured: bool = False
    verified: bool = False
    created_at: datetime


class ProfessionalUpdate(BaseModel):
    featured: Optional[bool] = None
    verified: Optional[bool] = None


class FeaturedUpdate(BaseModel):
    featured: bool


class VerifiedUpdate(BaseModel):
    verified: bool


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyResponse(BaseModel):
    id: int
    user_id: int
    company_name: str
    email: Optional[str] = None
    industry: str
    description: str
    website: Optional[str] = None
    size: str
    location: str
    featured: bool = False
    verified: bool = False
    created_at: datetime


class CompanyUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=2, max_length=200)
    industry: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    size: Optional[CompanySize] = None
    location: Optional[str] = None
    featured: Optional[bool] = None
    verified: Optional[bool] = None


# ============================================================
# JOB POSTING SCHEMAS
# ============================================================

class JobPostingResponse(BaseModel):
    id: int
    company_id: int
    company_name: Optional[str] = None
    title: str
    description: str
    location: str
    job_type: str
    min_compensation: Optional[int] = None
    max_compensation: Optional[int] = None
    compensation_unit: Optional[str] = None
    requirements: str = ""
    remote: bool = False
    featured: bool = False
    archived: bool = False
    status: str
    created_at: datetime
    modified_at: datetime
    expires_at: Optional[datetime] = None


class JobPostingUpdate(BaseModel):
    featured: Optional[bool] = None
    status: Optional[JobStatus] = None
    archived: Optional[bool] = None


# ============================================================
# CONTENT SCHEMAS (resources, categories, pages)
# ============================================================

class ResourceCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    content_url: Optional[str] = None
    resource_type: ResourceType
    category_id: Optional[int] = None
    image_url: Optional[str] = None
    featured: bool = False
    author_id: Optional[int] = None


class ResourceUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    content: Optional[str] = None
    content_url: Optional[str] = None
    resource_type: Optional[ResourceType] = None
    category_id: Optional[int] = None
    image_url: Optional[str] = None
    featured: Optional[bool] = None


class ResourceResponse(BaseModel):
    id: int
    author_id: int
    author_name: Optional[str] = None
    title: str
    description: str
    content: str
    content_url: Optional[str] = None
    resource_type: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    image_url: Optional[str] = None
    featured: bool = False
    created_at: datetime


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    resource_count: int = 0


SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class PageContentCreate(BaseModel):
    slug: str = Field(..., pattern=SLUG_PATTERN, max_length=200)
    title: str = Field(..., min_length=1, max_length=200)
    content: str
    meta_title: Optional[str] = Field(None, max_length=200)
    meta_description: Optional[str] = Field(None, max_length=300)


class PageContentUpdate(BaseModel):
    slug: Optional[str] = Field(None, pattern=SLUG_PATTERN, max_length=200)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None
    meta_title: Optional[str] = Field(None, max_length=200)
    meta_description: Optional[str] = Field(None, max_length=300)


class PageContentResponse(BaseModel):
    id: int
    slug: str
    title: str
    content: str
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    last_edited_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class PageMeta(BaseModel):
    title: str
    description: str


class PublicPageResponse(BaseModel):
    slug: str
    title: str
    content: str
    meta: PageMeta


# ============================================================
# BILLING SCHEMAS (plans, subscriptions, payments)
# ============================================================

class PlanResponse(BaseModel):
    id: str
    name: str
    plan_type: str
    price: float
    currency: str
    interval: str
    features: List[str] = []
    active: bool = True


class PlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    price: Optional[float] = Field(None, ge=0)
    features: Optional[List[str]] = None
    active: Optional[bool] = None


class SubscriptionResponse(BaseModel):
    id: int
    user_id: int
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    plan_id: str
    plan_name: Optional[str] = None
    status: str
    started_at: datetime
    current_period_end: Optional[datetime] = None
    canceled_at: Optional[datetime] = None


class PaymentResponse(BaseModel):
    id: str
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    payment_type: str
    status: str
    amount: float
    refunded_amount: float = 0
    currency: str
    description: Optional[str] = None
    created_at: datetime


class RefundRequest(BaseModel):
    amount: Optional[float] = Field(None, gt=0)


class RevenuePoint(BaseModel):
    month: str
    subscriptions: float
    consultations: float
    total: float


class SubscriptionPoint(BaseModel):
    month: str
    active: int
    canceled: int
    new: int


class RevenueMetricsResponse(BaseModel):
    revenue: List[RevenuePoint]
    subscriptions: List[SubscriptionPoint]
    total_revenue: float


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class StatCard(BaseModel):
    title: str
    value: str
    description: str


class DashboardOverview(BaseModel):
    total_users: int
    total_professionals: int
    total_companies: int
    total_jobs: int
    active_jobs: int
    total_resources: int
    total_revenue: float
    users_by_type: Dict[str, int]
    jobs_by_status: Dict[str, int]
    resources_by_category: Dict[str, int]


class RecentActivityItem(BaseModel):
    id: str
    message: str
    time: str


class DashboardResponse(BaseModel):
    cards: List[StatCard]
    overview: DashboardOverview
    recent_activity: List[RecentActivityItem]


class AdminStatsResponse(BaseModel):
    total_users: int
    active_subscriptions: int
    monthly_revenue: float
    pending_content: int
    user_growth: float
    conversion_rate: float


class DailyPoint(BaseModel):
    date: str
    value: float


# ============================================================
# SETTINGS SCHEMAS
# ============================================================

class SettingResponse(BaseModel):
    key: str
    value: Optional[str] = None
    description: Optional[str] = None
    updated_by: Optional[int] = None
    updated_at: datetime


class SettingsUpdate(BaseModel):
    settings: Dict[str, Optional[str]]

    @field_validator("settings")
    @classmethod
    def not_empty(cls, value):
        if not value:
            raise ValueError("settings must contain at least one key")
        for key in value:
            if not key or len(key) > 100:
                raise ValueError(f"invalid setting key '{key}'")
        return value


# ============================================================
# AUDIT SCHEMAS
# ============================================================

class AuditLogPage(BaseModel):
    items: List[ActivityEntry]
    total: int
    page: int
    limit: int
