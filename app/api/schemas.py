from pydantic import BaseModel, Field, model_validator
from typing import Optional, Dict, Any, List, Literal

NAME_PATTERN = r"^[A-Za-z ]+$"
PHONE_PATTERN = r"^\d+$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

Role = Literal["student", "professional"]

class TokenBundle(BaseModel):
    accessToken: str
    refreshToken: str
    expiresIn: int

class UserOut(BaseModel):
    id: str
    name: str
    email: str
    onboardingComplete: bool

class SignupRequest(BaseModel):
    email: str
    password: str = Field(min_length=8)
    name: Optional[str] = None

class LoginRequest(BaseModel):
    email: str
    password: str

class AuthResponse(BaseModel):
    token: TokenBundle
    user: UserOut

class RefreshRequest(BaseModel):
    refreshToken: str

class LogoutRequest(BaseModel):
    refreshToken: str

class GoogleOAuthRequest(BaseModel):
    idToken: str

class FirebaseOAuthRequest(BaseModel):
    idToken: str

class ProfileOut(BaseModel):
    id: str
    name: str
    email: str
    role: Optional[str] = None
    workingHours: Optional[int] = None
    freeTimeFrom: Optional[str] = None
    freeTimeTo: Optional[str] = None
    trustedContactName: Optional[str] = None
    trustedContactPhone: Optional[str] = None
    riskLevel: int
    onboardingComplete: bool

class _FreeTimeWindow(BaseModel):
    @model_validator(mode="after")
    def _start_before_end(self):
        start, end = getattr(self, "freeTimeFrom", None), getattr(self, "freeTimeTo", None)
        # HH:MM strings compare correctly as text
        if start and end and start >= end:
            raise ValueError("Start time must be before end time")
        return self

class ProfilePatch(_FreeTimeWindow):
    name: Optional[str] = Field(default=None, pattern=NAME_PATTERN, max_length=200)
    role: Optional[Role] = None
    workingHours: Optional[int] = Field(default=None, ge=1, le=12)
    freeTimeFrom: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    freeTimeTo: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    trustedContactName: Optional[str] = Field(default=None, pattern=NAME_PATTERN, max_length=200)
    trustedContactPhone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN, max_length=30)

class QuestionnaireIn(BaseModel):
    phq9Score: int = Field(ge=0, le=27)
    gad7Score: int = Field(ge=0, le=21)
    safetyRisk: bool = False

class AssessmentIn(QuestionnaireIn, _FreeTimeWindow):
    name: str = Field(pattern=NAME_PATTERN, max_length=200)
    role: Role
    workingHours: int = Field(ge=1, le=12)
    freeTimeFrom: str = Field(pattern=TIME_PATTERN)
    freeTimeTo: str = Field(pattern=TIME_PATTERN)
    trustedContactName: str = Field(pattern=NAME_PATTERN, max_length=200)
    trustedContactPhone: str = Field(pattern=PHONE_PATTERN, max_length=30)

class RiskOut(BaseModel):
    level: int
    label: str
    description: str
    needsSupport: bool
    assessed: bool

class OnboardingTurnOut(BaseModel):
    speaker: str
    text: str

class OnboardingStateOut(BaseModel):
    history: List[OnboardingTurnOut]
    isComplete: bool

class OnboardingMessageIn(BaseModel):
    message: str

class OnboardingMessageOut(BaseModel):
    question: str
    isComplete: bool
    history: List[OnboardingTurnOut]

class JournalIn(BaseModel):
    entry: str
    mood: Optional[str] = Field(default=None, max_length=40)

class JournalPatch(BaseModel):
    entry: Optional[str] = None
    mood: Optional[str] = Field(default=None, max_length=40)

class JournalOut(BaseModel):
    id: str
    entry: str
    mood: Optional[str] = None
    sentimentScore: Optional[float] = None
    analyzedAt: Optional[str] = None
    createdAt: str

class JournalAnalysisOut(BaseModel):
    entry: JournalOut
    risk: RiskOut

class ChatMessageIn(BaseModel):
    message: str

class ChatMessageOut(BaseModel):
    id: str
    role: str
    text: str
    mood: Optional[str] = None
    createdAt: str

class ChatReplyOut(BaseModel):
    userMessage: ChatMessageOut
    assistantMessage: ChatMessageOut
    meta: Optional[Dict[str, Any]] = None

class TaskOut(BaseModel):
    id: str
    title: str
    completed: bool
    completedAt: Optional[str] = None

class TasksOut(BaseModel):
    date: str
    tasks: List[TaskOut]
    completedCount: int
    totalCount: int
    completionPercentage: int

class WellnessScoresOut(BaseModel):
    moodScore: float
    anxietyScore: float
    stressScore: float
    socialEngagementScore: float
    overallWellnessScore: float

class WellnessPlanOut(BaseModel):
    id: str
    scores: WellnessScoresOut
    riskLevel: int
    shouldReferral: bool
    recommendations: List[str]
    dailyActivities: List[str]
    createdAt: str

class DashboardOut(BaseModel):
    greeting: str
    name: str
    risk: RiskOut
    tasks: TasksOut
    wellness: Optional[WellnessPlanOut] = None
    showReferral: bool
