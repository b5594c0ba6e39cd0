# edugpt/models/progress.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

DEFAULT_CURRENT_COURSE = "Getting Started"

ACHIEVEMENT_FIELDS = ('title', 'description', 'date', 'tier')
PROGRESS_FIELDS = (
    'progress', 'studyStreak', 'totalStudyTime', 'completedLessons', 'achievements',
    'courses', 'weeklyGoals', 'currentCourse', 'currentChapter', 'chapterProgress', 'lastUpdated'
)

@dataclass
class Achievement:
    """
    업적 한 건. 목록은 달성 순서(삽입 순서)를 유지합니다.
    date는 '2024-01-15'나 '2 days ago' 같은 표시용 문자열이며, 그 밖의 키(type 등)는 extra에 그대로 보존됩니다.
    """
    title: str
    description: str = ''
    date: str = ''
    tier: str = ''
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Achievement":
        return cls(
            title=data.get('title') or '',
            description=data.get('description') or '',
            date=data.get('date') or '',
            tier=data.get('tier') or '',
            extra={k: v for k, v in data.items() if k not in ACHIEVEMENT_FIELDS}
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            'title': self.title,
            'description': self.description,
            'date': self.date,
            'tier': self.tier
        })
        return data

@dataclass
class WeeklyGoals:
    study_sessions: int = 5
    study_hours: int = 10
    lessons_completed: int = 7

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "WeeklyGoals":
        defaults = cls()
        data = data or {}
        return cls(
            study_sessions=data.get('studySessions', defaults.study_sessions),
            study_hours=data.get('studyHours', defaults.study_hours),
            lessons_completed=data.get('lessonsCompleted', defaults.lessons_completed)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'studySessions': self.study_sessions,
            'studyHours': self.study_hours,
            'lessonsCompleted': self.lessons_completed
        }

@dataclass
class Progress:
    """
    Firestore 'progress' 컬렉션의 문서 구조 (문서 ID = uid).
    문서가 아직 없으면 Progress() 자체가 기본 형태입니다. 읽기만으로 문서를 생성하지 않습니다.
    클라이언트가 병합한 나머지 필드는 extra에 담겨 그대로 돌려줍니다.
    """
    progress: float = 0
    study_streak: int = 0
    total_study_time: float = 0
    completed_lessons: int = 0
    achievements: List[Achievement] = field(default_factory=list)
    courses: Dict[str, Any] = field(default_factory=dict)
    weekly_goals: WeeklyGoals = field(default_factory=WeeklyGoals)
    current_course: Optional[str] = None
    current_chapter: Optional[str] = None
    chapter_progress: Optional[float] = None
    last_updated: Optional[datetime] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Progress":
        """저장된 문서를 기본 형태 위에 덮어써서 생성합니다. 부분적으로만 저장된 문서도 나머지 필드는 기본값을 갖습니다."""
        data = data or {}
        return cls(
            progress=data.get('progress') or 0,
            study_streak=data.get('studyStreak') or 0,
            total_study_time=data.get('totalStudyTime') or 0,
            completed_lessons=data.get('completedLessons') or 0,
            achievements=[Achievement.from_dict(a) for a in data.get('achievements') or []],
            courses=dict(data.get('courses') or {}),
            weekly_goals=WeeklyGoals.from_dict(data.get('weeklyGoals')),
            current_course=data.get('currentCourse'),
            current_chapter=data.get('currentChapter'),
            chapter_progress=data.get('chapterProgress'),
            last_updated=data.get('lastUpdated'),
            extra={k: v for k, v in data.items() if k not in PROGRESS_FIELDS}
        )

    def recent_achievements(self, limit: int) -> List[Achievement]:
        """대시보드용 업적 목록. 저장된 순서 그대로 앞에서부터 limit개를 반환합니다."""
        return self.achievements[:limit]

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            'progress': self.progress,
            'studyStreak': self.study_streak,
            'totalStudyTime': self.total_study_time,
            'completedLessons': self.completed_lessons,
            'achievements': [a.to_dict() for a in self.achievements],
            'courses': dict(self.courses),
            'weeklyGoals': self.weekly_goals.to_dict()
        })
        if self.current_course is not None:
            data['currentCourse'] = self.current_course
        if self.current_chapter is not None:
            data['currentChapter'] = self.current_chapter
        if self.chapter_progress is not None:
            data['chapterProgress'] = self.chapter_progress
        if self.last_updated is not None:
            data['lastUpdated'] = self.last_updated
        return data
