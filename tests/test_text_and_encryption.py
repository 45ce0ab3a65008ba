import pytest

from shared.utils.encryption import (
    DecryptionError,
    decrypt,
    decrypt_field,
    decrypt_int,
    encrypt,
    is_encrypted,
)
from shared.utils.text_normalizer import (
    compact_code,
    contains_all_words,
    format_item_code,
    normalize_size,
    normalize_vietnamese,
    query_words,
    sizes_match,
)


class TestSizeNormalization:
    """Size labels are compared after dropping separators and case"""

    @pytest.mark.parametrize("label", ["Size S", "size-s", "SIZE_S", "sizes", " Size_S "])
    def test_variants_share_one_key(self, label):
        assert normalize_size(label) == "sizes"

    def test_different_sizes_do_not_match(self):
        assert not sizes_match("M", "L")
        assert sizes_match("X-L", "xl")

    def test_none_normalizes_to_empty(self):
        assert normalize_size(None) == ""


class TestVietnameseNormalization:
    def test_strips_diacritics(self):
        assert normalize_vietnamese("Áo Dài") == "ao dai"
        assert normalize_vietnamese("Đầm Dạ Hội") == "dam da hoi"

    def test_query_words_match_in_any_order(self):
        words = query_words("dai AO")
        assert contains_all_words("Áo Dài Lụa", words)
        assert not contains_all_words("Quần Tây", words)

    def test_empty_query_has_no_words(self):
        assert query_words("   ") == []


class TestItemCode:
    def test_known_category_uses_code_map(self):
        assert format_item_code("Áo Dài", 1) == "AD-000001"
        assert format_item_code("Giầy", 42) == "GI-000042"

    def test_unknown_category_uses_initials(self):
        assert format_item_code("Phụ Kiện", 7) == "PK-000007"

    def test_missing_category(self):
        assert format_item_code(None, None) == "XX-000000"
        assert format_item_code("   ", 3) == "XX-000003"

    def test_compact_code(self):
        assert compact_code("ad-000001") == "AD000001"


class TestEncryption:
    def test_encrypt_is_not_deterministic(self):
        first, second = encrypt("Size M"), encrypt("Size M")
        assert first != second
        assert decrypt(first) == decrypt(second) == "Size M"

    def test_ciphertext_shape(self):
        value = encrypt("Áo Dài")
        assert is_encrypted(value)
        nonce_hex, _ = value.split(":")
        assert len(nonce_hex) == 24

    def test_tampered_ciphertext_raises(self, bad_ciphertext):
        with pytest.raises(DecryptionError):
            decrypt(bad_ciphertext)

    def test_malformed_ciphertext_raises(self):
        with pytest.raises(DecryptionError):
            decrypt("not-encrypted")
        with pytest.raises(DecryptionError):
            decrypt("abcd:ef01")  # nonce too short

    def test_decrypt_field_passes_legacy_plaintext_through(self):
        assert decrypt_field("M") == "M"
        assert decrypt_field(None) is None

    def test_integers(self):
        assert decrypt_int(encrypt("5")) == 5
        assert decrypt_int("12") == 12
        with pytest.raises(DecryptionError):
            decrypt_int(encrypt("five"))
