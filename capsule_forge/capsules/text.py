"""Text capsule."""

from capsule_forge.schema import CapsuleDefinition

WEB = """import React from 'react'

type Variant = 'h1' | 'h2' | 'h3' | 'body' | 'caption' | 'label'
type Weight = 'light' | 'normal' | 'medium' | 'semibold' | 'bold'

export interface {% component %}Props {
  content: string
  variant?: Variant
  weight?: Weight
  color?: string
  align?: 'left' | 'center' | 'right'
  numberOfLines?: number
}

const SIZES: Record<Variant, number> = { h1: 32, h2: 24, h3: 20, body: 16, caption: 12, label: 14 }
const WEIGHTS: Record<Weight, number> = { light: 300, normal: 400, medium: 500, semibold: 600, bold: 700 }

export function {% component %}({
  content,
  variant = {% props.variant %},
  weight = {% props.weight %},
  color = {% theme.colors.textPrimary %},
  align = {% props.align %},
  numberOfLines,
}: {% component %}Props) {
  const Tag = variant.startsWith('h') ? (variant as 'h1' | 'h2' | 'h3') : 'p'
  return (
    <Tag
      style={{
        margin: 0,
        color,
        textAlign: align,
        fontFamily: variant.startsWith('h') ? {% theme.typography.headingFont %} : {% theme.typography.fontFamily %},
        fontSize: SIZES[variant] * {% theme.typography.scale %},
        fontWeight: WEIGHTS[weight],
        ...(numberOfLines
          ? { display: '-webkit-box', WebkitLineClamp: numberOfLines, WebkitBoxOrient: 'vertical', overflow: 'hidden' }
          : {}),
      }}
    >
      {content}
    </Tag>
  )
}

export default {% component %}
"""

IOS = """import SwiftUI

struct {% component %}: View {
    enum Variant { case h1, h2, h3, body, caption, label }
    enum Weight { case light, normal, medium, semibold, bold }
    enum Align { case left, center, right }

    let content: String
    var variant: Variant = {% props.variant %}
    var weight: Weight = {% props.weight %}
    var color: Color = {% theme.colors.textPrimary %}
    var align: Align = {% props.align %}
    var numberOfLines: Int? = nil

    var body: some View {
        SwiftUI.Text(content)
            .font(.system(size: size * {% theme.typography.scale %}, weight: fontWeight))
            .foregroundColor(color)
            .multilineTextAlignment(alignment)
            .lineLimit(numberOfLines)
    }

    private var size: CGFloat {
        switch variant {
        case .h1: return 32
        case .h2: return 24
        case .h3: return 20
        case .body: return 16
        case .caption: return 12
        case .label: return 14
        }
    }

    private var fontWeight: Font.Weight {
        switch weight {
        case .light: return .light
        case .normal: return .regular
        case .medium: return .medium
        case .semibold: return .semibold
        case .bold: return .bold
        }
    }

    private var alignment: TextAlignment {
        switch align {
        case .left: return .leading
        case .center: return .center
        case .right: return .trailing
        }
    }
}
"""

ANDROID = """import androidx.compose.runtime.Composable
import androidx.compose.ui.Modifier
import androidx.compose.ui.graphics.Color
import androidx.compose.ui.text.font.FontWeight
import androidx.compose.ui.text.style.TextAlign
import androidx.compose.ui.text.style.TextOverflow
import androidx.compose.ui.unit.sp

@Composable
fun {% component %}(
    content: String,
    variant: String = {% props.variant %},
    weight: String = {% props.weight %},
    color: Color = {% theme.colors.textPrimary %},
    align: String = {% props.align %},
    numberOfLines: Int? = null,
    modifier: Modifier = Modifier,
) {
    val size = when (variant) {
        "h1" -> 32
        "h2" -> 24
        "h3" -> 20
        "caption" -> 12
        "label" -> 14
        else -> 16
    }
    androidx.compose.material3.Text(
        text = content,
        modifier = modifier,
        color = color,
        fontSize = (size * {% theme.typography.scale %}).sp,
        fontWeight = when (weight) {
            "light" -> FontWeight.Light
            "medium" -> FontWeight.Medium
            "semibold" -> FontWeight.SemiBold
            "bold" -> FontWeight.Bold
            else -> FontWeight.Normal
        },
        textAlign = when (align) {
            "center" -> TextAlign.Center
            "right" -> TextAlign.End
            else -> TextAlign.Start
        },
        maxLines = numberOfLines ?: Int.MAX_VALUE,
        overflow = TextOverflow.Ellipsis,
    )
}
"""

TEXT = CapsuleDefinition.model_validate(
    {
        "id": "text",
        "name": "Text",
        "description": "Typography primitive with semantic variants",
        "category": "ui",
        "tags": ["typography", "content"],
        "props": [
            {"name": "content", "type": "string", "required": True},
            {
                "name": "variant",
                "type": "select",
                "default": "body",
                "options": ["h1", "h2", "h3", "body", "caption", "label"],
            },
            {
                "name": "weight",
                "type": "select",
                "default": "normal",
                "options": ["light", "normal", "medium", "semibold", "bold"],
            },
            {"name": "color", "type": "color", "description": "Hex color or theme token"},
            {
                "name": "align",
                "type": "select",
                "default": "left",
                "options": ["left", "center", "right"],
            },
            {"name": "numberOfLines", "type": "number", "min": 1},
        ],
        "platforms": {
            "web": {"code": WEB, "dependencies": ["react"]},
            "ios": {"code": IOS},
            "android": {"code": ANDROID},
        },
    }
)
