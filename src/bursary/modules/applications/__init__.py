"""
Applications Module

Bursary applications and the review pipeline:
1. Students apply (stage ``submitted``) and may withdraw (soft delete)
2. Reviewers approve; the acting role decides the next stage
   (ward -> county -> ministry -> finance -> disbursed)
3. Reviewers may reject with remarks; the stage is kept

API Endpoints:
- POST|PUT|GET /students/applications - Student side
- GET /applications - Reviewer queue
- POST /applications/approve, /applications/approve/bulk, /applications/reject
"""

from bursary.modules.applications.models import Application, ApplicationStage
from bursary.modules.applications.workflow import APPROVAL_TRANSITIONS, StageMachine

__all__ = ["Application", "ApplicationStage", "APPROVAL_TRANSITIONS", "StageMachine"]
