"""
Rule table mapping risk factors and trends to advisory strings.
"""
from typing import List, Optional

from app.scoring.metrics import RiskFactorSet
from app.scoring.temporal import Trend

HIGH_VARIANCE = "Algorithm variance high - multiple intervention approaches recommended"
DECLINING = "WARNING: Risk score is declining - immediate intervention needed"
IMPROVING = "Positive trend detected - continue current support"
ACADEMIC_URGENT = "Urgent: Intensive academic support required"
ACADEMIC_TUTORING = "Schedule tutoring sessions to improve grades"
ATTENDANCE_CRITICAL = "Critical: Address chronic absenteeism immediately"
ATTENDANCE_CONTACT = "Address attendance issues - contact student/parents"
ENGAGEMENT_PERSONALIZED = "Implement personalized engagement strategies"
ENGAGEMENT_INTERACTIVE = "Increase engagement through interactive activities"
FINANCIAL_AID = "Discuss financial aid options"
SOCIAL_PEER = "Encourage peer interaction and group activities"
COMPOUND_RISK = "Multiple risk factors are compounding - coordinate a multi-factor intervention plan"

HIGH_VARIANCE_STD_DEV = 20.0
COMPOUND_WARNING_MULTIPLIER = 1.2


def generate_recommendations(
    factors: RiskFactorSet,
    trend: Optional[Trend] = None,
    compound_multiplier: Optional[float] = None,
    ensemble_std_dev: Optional[float] = None,
) -> List[str]:
    """
    Generate recommendations in a fixed check order.

    Every matching rule fires. Within one factor only the most severe
    message is emitted.

    Args:
        factors: Risk factors (0-100, higher is riskier)
        trend: Score trend, if known
        compound_multiplier: Compound interaction multiplier, if the algorithm has one
        ensemble_std_dev: Spread across algorithms, if an ensemble was computed

    Returns:
        Ordered list of recommendation strings
    """
    recommendations = []

    if ensemble_std_dev is not None and ensemble_std_dev > HIGH_VARIANCE_STD_DEV:
        recommendations.append(HIGH_VARIANCE)
    if trend == Trend.DECLINING:
        recommendations.append(DECLINING)
    elif trend == Trend.IMPROVING:
        recommendations.append(IMPROVING)

    if factors.academic > 60:
        recommendations.append(ACADEMIC_URGENT)
    elif factors.academic > 50:
        recommendations.append(ACADEMIC_TUTORING)

    if factors.attendance > 50:
        recommendations.append(ATTENDANCE_CRITICAL)
    elif factors.attendance > 40:
        recommendations.append(ATTENDANCE_CONTACT)

    if factors.engagement > 55:
        recommendations.append(ENGAGEMENT_PERSONALIZED)
    elif factors.engagement > 50:
        recommendations.append(ENGAGEMENT_INTERACTIVE)

    if factors.financial > 50:
        recommendations.append(FINANCIAL_AID)
    if factors.social > 60:
        recommendations.append(SOCIAL_PEER)

    if compound_multiplier is not None and compound_multiplier > COMPOUND_WARNING_MULTIPLIER:
        recommendations.append(COMPOUND_RISK)

    return recommendations
