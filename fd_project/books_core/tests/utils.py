from books_core.models import Company, Document, EntityMembership, User


def make_tenant(name="Test Co", username="alice", role="owner", slug=None):
    """Company plus a member user whose default company it is."""
    company = Company.objects.create(name=name, slug=slug or name.lower().replace(" ", "-"))
    user = User.objects.create_user(username=username, password="pw")
    EntityMembership.objects.create(user=user, company=company, role=role)
    user.default_company = company
    user.save(update_fields=["default_company"])
    return company, user


def make_document(company, document_type, extracted_data, name=None, status="extracted"):
    file_name = name or f"{document_type}.xlsx"
    return Document.objects.create(
        company=company,
        file_name=file_name,
        original_name=file_name,
        document_type=document_type,
        status=status,
        extracted_data=extracted_data,
    )
