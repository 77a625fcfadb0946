from .user import UserRole, User, UserBasic, OrganizationNode, AccessScope
from .report import Report, StoredReport, ReportCreate, ReportUpdate, StorageStats
from .project import Project
from .aggregation import ReportingRate, AggregationResult, AggregationRequest, ManagementLevelFormatRequest
from .chat import ChatRequest, ChatResponse, ReportSource
from .summarize import SummarizeRequest, SummarizeResponse
from .transcribe import TranscriptionResponse
