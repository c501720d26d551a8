# products-management/backend/product_service/tests/test_service.py

from unittest.mock import MagicMock

import pytest
from app.exceptions import ProductNotFound
from app.models import Product
from app.repository import ProductRepository
from app.schemas import ProductResponse
from app.service import ImageUpload, ProductService
from app.storage import BlobImageStorage


@pytest.fixture
def repository():
    repository = MagicMock(spec=ProductRepository)
    repository.get.return_value = None

    def save(product):
        if product.id is None:
            product.id = 1
        return product

    repository.save.side_effect = save
    return repository


@pytest.fixture
def storage():
    storage = MagicMock(spec=BlobImageStorage)
    storage.signed_url.side_effect = lambda key: f"blob.test/{key}?sig" if key else None
    storage.upload.side_effect = lambda key, data, content_type=None: f"blob.test/{key}?sig"
    return storage


@pytest.fixture
def service(repository, storage):
    return ProductService(repository, storage)


def png(filename="product.png"):
    return ImageUpload(filename=filename, content_type="image/png", data=b"png")


def test_create_product_with_image_saves_key_and_returns_signed_url(
    service, repository, storage
):
    result = service.create_product(Product(name="tests", price=1, quantity=10), png())

    assert result == ProductResponse(
        id=1, name="tests", price=1, quantity=10, image_url="blob.test/1-product.png?sig"
    )
    assert repository.save.call_count == 2
    assert repository.save.call_args.args[0].image_location == "1-product.png"
    storage.upload.assert_called_once_with("1-product.png", b"png", "image/png")


def test_create_product_without_image(service, repository, storage):
    result = service.create_product(Product(name="tests", price=1, quantity=10), None)

    assert result.image_url is None
    assert repository.save.call_count == 1
    storage.upload.assert_not_called()


def test_create_product_with_empty_image(service, repository, storage):
    empty = ImageUpload(filename="x.png", content_type="image/png", data=b"")

    result = service.create_product(Product(name="tests", price=1, quantity=1), empty)

    assert result.image_url is None
    assert repository.save.call_args.args[0].image_location is None
    storage.upload.assert_not_called()


def test_get_product_detail_resolves_signed_url(service, repository):
    stored = Product(id=1, name="tests", price=1, quantity=1, image_location="1-image.png")
    repository.get.return_value = stored

    result = service.get_product_detail(1)

    assert result.image_url == "blob.test/1-image.png?sig"
    assert stored.image_location == "1-image.png"


def test_get_product_detail_not_found(service):
    with pytest.raises(ProductNotFound) as exc_info:
        service.get_product_detail(1)
    assert str(exc_info.value) == "Product with id 1, not found"


def test_get_products_resolves_each_url(service, repository, storage):
    repository.list_all.return_value = [
        Product(id=1, name="test 1", price=1, quantity=1, image_location="1-example.png"),
        Product(id=2, name="test 2", price=1, quantity=1, image_location=None),
    ]

    result = service.get_products()

    assert [product.image_url for product in result] == [
        "blob.test/1-example.png?sig",
        None,
    ]
    assert storage.signed_url.call_count == 2


def test_update_product_replaces_image(service, repository, storage):
    repository.get.return_value = Product(
        id=2, name="test 2", price=1, quantity=1, image_location="2-old.png"
    )

    result = service.update_product(
        2, Product(name="update test", price=1, quantity=2), png("test.png")
    )

    assert result == ProductResponse(
        id=2, name="update test", price=1, quantity=2, image_url="blob.test/2-test.png?sig"
    )
    storage.delete.assert_called_once_with("2-old.png")
    storage.upload.assert_called_once_with("2-test.png", b"png", "image/png")
    assert repository.save.call_args.args[0].image_location == "2-test.png"


def test_update_product_without_image_clears_location(service, repository, storage):
    repository.get.return_value = Product(
        id=1, name="tests", price=1, quantity=1, image_location="1-image.png"
    )

    result = service.update_product(1, Product(name="update test", price=1, quantity=2))

    assert result.image_url is None
    assert result.name == "update test"
    storage.delete.assert_called_once_with("1-image.png")
    storage.upload.assert_not_called()
    assert repository.save.call_args.args[0].image_location is None


def test_update_product_not_found(service, storage):
    with pytest.raises(ProductNotFound) as exc_info:
        service.update_product(1, Product(name="update test", price=1, quantity=2))
    assert str(exc_info.value) == "Product with id 1, not found"
    storage.delete.assert_not_called()


def test_delete_product_removes_row_then_image(service, repository, storage):
    stored = Product(id=1, name="tests", price=1, quantity=1, image_location="1-image.png")
    repository.get.return_value = stored

    service.delete_product(1)

    repository.delete.assert_called_once_with(stored)
    storage.delete.assert_called_once_with("1-image.png")


def test_delete_product_not_found(service, repository, storage):
    with pytest.raises(ProductNotFound):
        service.delete_product(1)
    repository.delete.assert_not_called()
    storage.delete.assert_not_called()


def test_delete_product_without_image(service, repository, storage):
    stored = Product(id=3, name="tests", price=1, quantity=1, image_location=None)
    repository.get.return_value = stored

    service.delete_product(3)

    repository.delete.assert_called_once_with(stored)
    storage.delete.assert_called_once_with(None)
