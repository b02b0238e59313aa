# tiklive/services/mock_data.py
"""Demo payloads served by the public endpoints when no database is configured."""
from datetime import datetime

PLACEHOLDER_IMG = "https://via.placeholder.com/150"


def _now():
    return datetime.utcnow().isoformat()


def _category(id_, name, description, order):
    return {
        "id": id_,
        "name": name,
        "description": description,
        "is_active": True,
        "sort_order": order,
        "created_at": _now(),
    }


def categories():
    return [
        _category(1, "Sample category 1", "Sample category description", 1),
        _category(2, "Sample category 2", "Sample category description", 2),
    ]


def default_categories():
    """Returned when the category table is empty."""
    return [_category(1, "Default category", "Default task category", 1)]


def fallback_categories():
    """Returned when the category query fails."""
    return [
        _category(1, "Backup category 1", "Backup category description", 1),
        _category(2, "Backup category 2", "Backup category description", 2),
    ]


def tasks():
    return [{
        "id": 1,
        "title": "Sample task 1",
        "description": "A sample task shown while no database is configured.",
        "budget_min": 1000,
        "budget_max": 5000,
        "status": "open",
        "company": {"company_name": "Sample company", "logo_url": None},
        "category": {"name": "Sample category"},
    }]


def task_detail(task_id):
    return {
        "id": task_id,
        "title": f"Sample task {task_id}",
        "description": "Details of a sample task.",
        "budget_min": 1000,
        "budget_max": 5000,
        "status": "open",
        "company": {
            "company_name": "Sample company",
            "logo_url": PLACEHOLDER_IMG,
            "industry": "Technology",
            "company_size": "50-100",
        },
        "category": {"name": "Sample category"},
        "requirements": ["Requirement 1", "Requirement 2", "Requirement 3"],
        "live_date": _now(),
        "duration_hours": 2,
        "location": "Online",
        "max_applicants": 10,
        "current_applicants": 3,
        "views_count": 150,
        "applications": [],
    }


def task_applications(task_id):
    return [{
        "id": 1,
        "task_id": task_id,
        "influencer": {
            "nickname": "Sample influencer 1",
            "avatar_url": "https://via.placeholder.com/50",
            "rating": 4.5,
            "total_reviews": 20,
            "hourly_rate": 200,
        },
        "status": "pending",
        "applied_at": _now(),
    }]


def influencers():
    return [
        {
            "id": 1,
            "nickname": "Sample influencer 1",
            "real_name": "Zhang San",
            "avatar_url": PLACEHOLDER_IMG,
            "rating": 4.5,
            "total_reviews": 20,
            "hourly_rate": 200,
            "followers_count": 50000,
            "bio": "Live-stream host focused on beauty and fashion.",
            "is_verified": True,
            "is_approved": True,
        },
        {
            "id": 2,
            "nickname": "Sample influencer 2",
            "real_name": "Li Si",
            "avatar_url": PLACEHOLDER_IMG,
            "rating": 4.8,
            "total_reviews": 35,
            "hourly_rate": 300,
            "followers_count": 80000,
            "bio": "Gaming streamer covering mobile and PC titles.",
            "is_verified": True,
            "is_approved": True,
        },
    ]


def influencer_detail(influencer_id):
    return {
        **influencers()[0],
        "id": influencer_id,
        "nickname": "Sample influencer",
        "location": "Beijing",
        "categories": ["beauty", "fashion", "live"],
        "tags": [],
        "created_at": _now(),
        "updated_at": _now(),
    }


def company_detail(company_id):
    return {
        "id": company_id,
        "company_name": "Sample company",
        "logo_url": PLACEHOLDER_IMG,
        "industry": "Technology",
        "company_size": "50-100",
        "description": "A sample company shown while no database is configured.",
        "is_verified": True,
        "tasks": tasks(),
    }


def _video(id_, title, featured, order):
    return {
        "id": id_,
        "category_id": 1,
        "title": title,
        "description": "Sample showcase video.",
        "video_url": None,
        "poster_url": PLACEHOLDER_IMG,
        "duration": "01:30",
        "influencer_name": "Sample influencer 1",
        "influencer_avatar": PLACEHOLDER_IMG,
        "influencer_rating": 4.5,
        "views_count": 0,
        "likes_count": 0,
        "comments_count": 0,
        "shares_count": 0,
        "tags": [],
        "is_featured": featured,
        "is_active": True,
        "sort_order": order,
        "category": {"name": "Sample category 1", "description": "Sample category description"},
        "created_at": _now(),
    }


def videos():
    return [
        _video(1, "Sample video 1", True, 1),
        _video(2, "Sample video 2", True, 2),
        _video(3, "Sample video 3", False, 3),
    ]


def video_categories():
    return [
        {"id": 1, "name": "Sample category 1", "description": "Sample category description",
         "sort_order": 1, "is_active": True},
    ]
