#!/usr/bin/env python3
"""
Sample data generator for the Academic Report Engine
Creates branches, courses, students and graded semesters for demonstration
"""

from app import create_app
from database import db
from models.academic import Branch, Course
from models.grades import Grade
from models.student import Student

def create_sample_data():
    """Create sample data for the system"""
    app = create_app()

    with app.app_context():
        print("Creating sample data...")

        branches = [Branch(name=name) for name in ('Computer Science Engineering', 'Information Technology')]
        db.session.add_all(branches)
        db.session.flush()
        print(f"✓ Created {len(branches)} branches")

        # Create courses
        courses_data = [
            {'course_code': 'CSE101', 'name': 'Python Programming', 'credits': 4},
            {'course_code': 'CSE102', 'name': 'Data Structures', 'credits': 4},
            {'course_code': 'MAT101', 'name': 'Engineering Mathematics I', 'credits': 3},
            {'course_code': 'MAT102', 'name': 'Engineering Mathematics II', 'credits': 3},
            {'course_code': 'CSE201', 'name': 'Database Management', 'credits': 4},
            {'course_code': 'CSE202', 'name': 'Web Development', 'credits': 3},
            {'course_code': 'HSS100', 'name': 'Induction Programme', 'credits': 0},
        ]
        db.session.add_all(Course(**data) for data in courses_data)
        print(f"✓ Created {len(courses_data)} courses")

        # Create students
        students_data = [
            {'registration_number': '2021CSE001', 'name': 'Aarav Sharma', 'branch_id': branches[0].id,
             'current_semester': 4, 'address': '14 Lake Road, Pune'},
            {'registration_number': '2021CSE002', 'name': 'Diya Patel', 'branch_id': branches[0].id,
             'current_semester': 4},
            {'registration_number': '2021IT001', 'name': 'Kabir Rao', 'branch_id': branches[1].id,
             'current_semester': 3, 'address': '7 Hill View, Mysuru'},
        ]
        db.session.add_all(Student(**data) for data in students_data)
        db.session.flush()
        print(f"✓ Created {len(students_data)} students")

        grades_data = [
            ('2021CSE001', [(1, 'HSS100', 'COMPLE'), (1, 'CSE101', 'A+'), (1, 'MAT101', 'A'),
                            (2, 'CSE102', 'O'), (2, 'MAT102', 'B+'),
                            (3, 'CSE201', 'A'), (3, 'CSE202', 'B')]),
            ('2021CSE002', [(1, 'CSE101', 'B'), (1, 'MAT101', 'F'),
                            (2, 'CSE102', 'C'), (2, 'MAT102', 'ABSENT'),
                            (3, 'CSE201', 'P'), (3, 'MAT101', 'B+')]),
            ('2021IT001', [(1, 'CSE101', 'A'), (1, 'MAT101', 'B+'),
                           (2, 'CSE102', 'A'), (2, 'MAT102', 'A+')]),
        ]
        count = 0
        for registration_number, rows in grades_data:
            for semester, course_code, grade in rows:
                db.session.add(Grade(registration_number=registration_number, course_code=course_code,
                                     semester=semester, grade=grade))
                count += 1
        db.session.commit()
        print(f"✓ Created {count} grade records")
        print("Sample data created successfully!")

if __name__ == '__main__':
    create_sample_data()
