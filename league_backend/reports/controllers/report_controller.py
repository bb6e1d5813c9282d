from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from league_backend.core.database import get_db
from league_backend.core.utils import parse_positive_int
from league_backend.reports.models.report_schema import GenerateReportBody
from league_backend.reports.services.report_service import ReportService, report_summary

router = APIRouter()


@router.get("")
def list_reports(db: Session = Depends(get_db)):
    """Archived reports, newest season and round first."""
    return {"reports": ReportService(db).list_reports()}


@router.get("/round")
def round_report(round: Optional[str] = None, leagueCode: Optional[str] = None, db: Session = Depends(get_db)):
    """Round report built on the fly, without archiving it."""
    round_no = parse_positive_int(round, "round") if round not in (None, "") else None
    return ReportService(db).build_round_report(round_no, leagueCode)


@router.post("/generate")
def generate_report(body: GenerateReportBody, db: Session = Depends(get_db)):
    return ReportService(db).generate_report(body.round, body.leagueCode)


@router.get("/{report_id}")
def get_report(report_id: str, db: Session = Depends(get_db)):
    report = ReportService(db).get_report(parse_positive_int(report_id, "id"))
    return {**report_summary(report), "content": report.content}


@router.delete("")
def delete_report(id: Optional[str] = None, db: Session = Depends(get_db)):
    return ReportService(db).delete_report(parse_positive_int(id, "id"))
